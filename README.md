# levelkit

Small, dependency-free building blocks for LevelDB-style key/value stores,
and harnesses that drive a store or an iterator you supply and check it
against an in-memory model.

## Modules

- `levelkit.buffer` – `Buffer`, a growable byte buffer: `write`, `write_byte`,
  `read`, `read_byte`, `read_bytes(delim)`, `next`, `truncate`, `reset`,
  `alloc`, `read_from(reader)` and `write_to(writer)`. `read_byte` raises
  `EOFError` when empty.
- `levelkit.bufferpool` – `BufferPool(baseline)`, which hands out byte buffers
  with `get(n)`, takes them back with `put(buf)`, keeps a few per size class,
  drops idle ones over time, and reports its counters through `str()`.
  `close()` empties it; afterwards `get` simply allocates.
- `levelkit.checksum` – CRC-32C (Castagnoli): `new_crc`, `update_crc` and
  `mask_crc` for the masked form stored next to data.
- `levelkit.hashing` – `hash32(data, seed)`, a murmur-like 32-bit hash.
- `levelkit.keyrange` – `KeyRange(start, limit)` (start included, limit
  excluded, `None` unbounded) and `bytes_prefix(prefix)`.
- `levelkit.releaser` – `BasicReleaser` (usable as a context manager),
  `NoopReleaser`, `ReleasedError` and `HasReleaserError`.
- `levelkit.fmtutil` – `shorten`, `shorten_bytes`, `signed_shorten_bytes` and
  `signed_int` for compact statistics output.
- `levelkit.ikey` – internal keys: `make_internal_key`, `parse_internal_key`,
  `valid_internal_key`, the `InternalKey` bytes type, `KeyType` and
  `InternalKeyCorrupted`.
- `levelkit.keygen` – `bytes_separator`, `bytes_after`, `new_rand`, the
  generators `random_index`, `shuffled_index`, `random_range`, and named
  callback groups with `defer` / `run_defer`.
- `levelkit.kvset` – `KeyValue`, an ordered key/value model with searching,
  slicing and range helpers, ready-made sets (`empty_key`, `empty_value`,
  `one_key_value`, `big_value`, `special_key`, `multiple_key_value`) and
  `generate(...)` for increasing random keys.
- `levelkit.itertesting` – `IteratorTesting` and `do_iterator_testing`, which
  walk and seek an iterator (`first`, `last`, `next`, `prev`, `seek(key)`,
  `key`, `value`, `error`, `release`) and check every step.
- `levelkit.dbtesting` – `DBTesting` and `do_db_testing`, random puts and
  deletes against a store with `get`, `put` and `delete`; a missing key must
  raise `levelkit.dbtesting.NotFoundError`.
- `levelkit.kvchecks` – `check_find`, `check_find_after_last`, `check_get`,
  `check_has`, `check_iter`, `key_value_checks` and `standard_key_values`.
- `levelkit.stressdata` – self-checking records (`random_data`,
  `data_checksum`, `data_split`, `data_ns`, `data_prefix`, `data_i`,
  `data_prefix_range`, `data_ns_range`), `parse_int_list` /
  `format_int_list`, and `LatencyStats` (durations in nanoseconds).

Failed checks in the harnesses raise `AssertionError`.

## Installing

```
pip install .
pip install ".[test]"   # with pytest
```

## Examples

```python
from levelkit.checksum import new_crc, mask_crc
from levelkit.hashing import hash32
from levelkit.keyrange import bytes_prefix
from levelkit.ikey import KeyType, make_internal_key, parse_internal_key

stored = mask_crc(new_crc(b"hello"))
h = hash32(b"hello", 0xBC9F1D34)

r = bytes_prefix(b"user:")          # KeyRange(start=b"user:", limit=b"user;")

ik = make_internal_key(b"apple", 42, KeyType.VAL)
ukey, seq, kt = parse_internal_key(ik)   # (b"apple", 42, KeyType.VAL)
```

Checking a store against the model:

```python
from levelkit.dbtesting import DBTesting, NotFoundError, do_db_testing
from levelkit.keygen import new_rand
from levelkit.kvset import generate


class DictStore:
    def __init__(self):
        self.data = {}

    def get(self, key):
        try:
            return self.data[key]
        except KeyError:
            raise NotFoundError(key) from None

    def put(self, key, value):
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)


rnd = new_rand(1)
t = DBTesting(DictStore(), rnd=rnd, deleted=generate(rnd, 100, 1, 1, 20, 5, 5))
do_db_testing(t)
```

If the store also has `new_iterator(key_range)`, `do_db_testing` checks
iteration too.

Stress records:

```python
from levelkit.stressdata import random_data, data_checksum, data_i

rec = random_data(3, 1, 7, 64)
stored, computed = data_checksum(rec)   # equal unless the record is damaged
assert data_i(rec) == 7
```

## What this package does not do

It contains no storage engine: there is no database, table format, journal,
compaction or file storage here, and no command-line tools. The harnesses
only exercise a store or iterator that you provide.

## Running the tests

```
pytest
```