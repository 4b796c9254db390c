# avroschema

Tools for working with Apache Avro schemas in plain Python, with no
dependencies outside the standard library:

- parse schema documents (JSON text, bare type names, or files), with
  named-type references, custom properties, docs, field defaults and logical
  types;
- produce the canonical form of a schema and fingerprint it with SHA-256,
  MD5 or the Avro CRC-64 (Rabin) fingerprint;
- check whether data written with one schema can be read with another;
- write Avro binary primitives (zig-zag varints, floats, strings, blocks);
- map type names to Python types and back;
- talk to a Confluent-compatible schema registry over HTTP.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `avroschema.base` | `Schema` and its primitive and container kinds (`PrimitiveSchema`, `NullSchema`, `ArraySchema`, `MapSchema`, `UnionSchema`, `FixedSchema`, `RefSchema`), `Type`, `LogicalType`, `FingerprintType`, `SchemaCache`, `SchemaError`, `crc64_avro` |
| `avroschema.named` | `RecordSchema`, `EnumSchema`, `Field`, `validate_default` |
| `avroschema.parse` | `parse`, `parse_with_cache`, `parse_files`, `DEFAULT_SCHEMA_CACHE` |
| `avroschema.compatibility` | `SchemaCompatibility`, `IncompatibleSchemaError` |
| `avroschema.writer` | `Writer` |
| `avroschema.resolver` | `TypeResolver` |
| `avroschema.registry` | `Client`, `SchemaInfo`, `RegistryError` |

## Parsing schemas

```python
from avroschema.parse import parse, parse_files

schema = parse('{"type": "record", "name": "test", "namespace": "org.example",'
               ' "fields": [{"name": "a", "type": "long"},'
               ' {"name": "b", "type": "string", "default": "x"}]}')

print(schema.type)              # Type.RECORD
print(str(schema))              # the canonical form
print(schema.fingerprint())     # SHA-256 of the canonical form, as bytes
print(schema.fields[1].default) # 'x'
```

Text that is not valid JSON is taken as a bare type name, so `parse("int")`
and `parse('"int"')` give the same schema.

Named types (records, enums, fixed) are stored in a `SchemaCache` as they are
parsed, so later schemas can refer to them by name. `parse` and `parse_files`
use the shared `DEFAULT_SCHEMA_CACHE`; `parse_with_cache(text, namespace,
cache)` lets you supply your own cache and enclosing namespace. A reference
to a record resolves to a `RefSchema` pointing at it, which is how recursive
records are expressed.

`parse_files` parses several files in order and returns the last schema,
which lets one file build on the types declared in another:

```python
schema = parse_files("common.avsc", "event.avsc")
```

Invalid schemas raise `avroschema.base.SchemaError` (a `ValueError`);
files that cannot be read raise the usual `OSError`.

Properties that are not reserved by the Avro specification are kept and can
be read back with `prop`:

```python
schema = parse('{"type": "array", "items": "int", "foo": "bar"}')
schema.prop("foo")   # 'bar'
```

Unions offer `nullable()`, `indices()` (the positions of the null and the
other type in a two-member nullable union, else `(0, 0)`) and `get(name)`.

## Fingerprints

```python
from avroschema.base import FingerprintType

crc = schema.fingerprint_using(FingerprintType.CRC64_AVRO)  # 8 bytes, big-endian
md5 = schema.fingerprint_using("MD5")
```

An unknown algorithm name raises `SchemaError`. Fingerprints are computed
over the canonical form and cached on the schema.

## Compatibility

```python
from avroschema.compatibility import IncompatibleSchemaError, SchemaCompatibility

reader = parse('"long"')
writer = parse('"int"')

try:
    SchemaCompatibility().compatible(reader, writer)
except IncompatibleSchemaError as exc:
    print("cannot read:", exc)
```

`compatible` returns nothing when the reader can read the writer's data and
raises `IncompatibleSchemaError` (a `SchemaError`) otherwise. Numeric
promotions (int to long, float or double; long to float or double; float to
double), string/bytes interchange, unions on either side, matching names and
sizes of named types, enum symbols, and record fields with defaults are taken
into account. Results are cached per reader/writer fingerprint pair, which
also stops recursion through self-referencing schemas.

## Writing Avro binary

```python
import io
from avroschema.writer import Writer

out = io.BytesIO()
w = Writer(out)
w.write_long(27)
w.write_string("foo")
w.flush()
print(out.getvalue())   # b'6\x06foo'
```

`Writer` buffers everything until `flush()`. Without an output stream it
only buffers; `buffer()` and `buffered()` show what has been written.
Besides `write`, `write_bool`, `write_int`, `write_long`, `write_float`,
`write_double`, `write_bytes` and `write_string`, it offers
`write_block_header(length, size)` and `write_block_cb(callback)`, which
writes the items the callback produces as one block prefixed with its count
and byte size. If writing to the stream fails, the error is raised and kept
in `w.error`, and later flushes raise it again.

## Type resolution

```python
from avroschema.resolver import TypeResolver

resolver = TypeResolver()
resolver.type("long.timestamp-millis")   # datetime.datetime
resolver.name(float)                     # ['float', 'double']
```

Primitive and logical type names come pre-registered; `register(name, typ)`
adds more. Unknown names or types raise `SchemaError`.

## Schema registry client

```python
from avroschema.registry import Client, RegistryError

client = Client("http://localhost:8081")

schema = client.get_schema(5)             # cached after the first fetch
subjects = client.get_subjects()
versions = client.get_versions("foobar")
info = client.get_latest_schema_info("foobar")
print(info.id, info.version, info.schema)

try:
    schema_id, schema = client.is_registered("foobar", '["null","string","int"]')
except RegistryError:
    schema_id, schema = client.create_schema("foobar", '["null","string","int"]')
```

HTTP basic authentication is enabled by passing credentials:

```python
password = "password"
client = Client("http://localhost:8081", username="user", password=password)
```

The client also accepts a `urllib.request.OpenerDirector` as `opener` and a
`timeout` in seconds (15 by default). A base URL without a scheme and host
raises `ValueError`. Error responses from the registry raise `RegistryError`,
carrying the HTTP `status_code`, the registry's error `code` and its
`message`; its text is the message, or `registry error: <status>` when the
registry gave none. Connection failures raise the usual `urllib` errors.

## What this package does not do

It works with schemas, not with data read against them: there is no reader
or decoder for Avro binary data, no encoder that turns Python values into
bytes according to a schema (only the primitive `Writer`), and no support
for Avro object container files.