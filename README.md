# homestate

Building blocks for a tool that manages the files in your home directory from
a source directory. The package models how source file names encode target
attributes, how the actual state of the filesystem is observed, and how state
is persisted and encrypted. It has no runtime dependencies beyond the
standard library.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## What is inside

- `homestate.core`: shared constants (the `dot_`, `private_`, `run_` ... name
  prefixes and the `.chezmoi*` special file names), error classes such as
  `NotInAbsDirError` and `UnsupportedFileTypeError`, and helpers:
  `sha256_sum`, `suspicious_source_dir_entry`, `mode_type_name`, `is_empty`,
  `is_executable`, `is_private`, `is_read_only`, and `fqdn_hostname`, which
  reads `etc/hosts` and then `etc/hostname` under a given root.
- `homestate.abspath`: `AbsPath` is an immutable slash-separated absolute path
  with `base`, `dir`, `ext`, `join`, `split` and `trim_dir_prefix`.
  `new_abs_path_from_ext_path`, `expand_tilde`, `normalize_path`,
  `home_dir_abs_path` and `parse_abs_path` turn user input into paths.
- `homestate.hexbytes`: `HexBytes`, bytes whose text form is lower-case hex.
- `homestate.mode`: the `Mode` enum (`file`, `symlink`) and `parse_mode`,
  which raises `InvalidModeError` for anything else.
- `homestate.attr`: `parse_dir_attr` and `parse_file_attr` turn source names
  such as `private_dot_ssh` or `run_once_before_install.sh.tmpl` into
  `DirAttr` and `FileAttr` values. Their `source_name` methods go the other
  way, and `perm` gives the resulting permission bits.
- `homestate.autotemplate`: `auto_template` replaces known values in file
  contents with template references such as `{{ .email }}`, longest values
  first and only on word boundaries.
- `homestate.data`: `kernel`, `os_release` and `parse_os_release` collect
  facts about the machine from files under a given root.
- `homestate.entrytypeset`: `EntryTypeSet.parse("all,noscripts")` selects
  the kinds of entries to work on; `EntryTypeBits` is the underlying flag.
- `homestate.entrystate`: `EntryState` records the type, mode and contents
  hash of an entry; `entry_states_equivalent` compares two states, treating
  `None` as absent.
- `homestate.lazy`: `LazyContents` and `LazyLinkname` compute contents or a
  link target once, on first use, along with its SHA256.
- `homestate.actualstateentry`: `new_actual_state_entry` inspects a path in a
  system and returns an `ActualStateAbsent`, `ActualStateDir`,
  `ActualStateFile` or `ActualStateSymlink`.
- `homestate.persistentstate`: bucketed key/value stores held in memory
  (`MockPersistentState`), discarding everything (`NullPersistentState`), or
  logging every call to another store (`DebugPersistentState`).
- `homestate.sqlitepersistentstate`: `SQLitePersistentState` keeps the same
  buckets in an SQLite file. Reads from a missing file return nothing and do
  not create it; the first write creates it. Open it with
  `PersistentStateMode.READ_ONLY` to refuse writes.
- `homestate.encryption`: the `Encryption` interface, `NoEncryption`, which
  raises `NoEncryptionError` on every operation, and `DebugEncryption`, which
  logs the calls to another encryption.
- `homestate.ageencryption`: `AgeEncryption` encrypts and decrypts by running
  an external `age` command, with identities, recipients, recipient files,
  passphrase or symmetric modes.
- `homestate.interpreter`: `Interpreter` builds the argument vector that runs
  a script.
- `homestate.archivereadersystem`: `ArchiveReaderSystem` reads tar, tar.gz,
  tar.bz2 and zip archives into a read-only view with `lstat`, `read_file`
  and `readlink`; `guess_archive_format` and `walk_archive` are available on
  their own.
- `homestate.dryrunsystem`: `DryRunSystem` passes reads to a wrapped system
  and only records, in `modified`, that a write was asked for.

## Example

```python
from homestate.attr import parse_file_attr

attr = parse_file_attr("private_executable_dot_profile.tmpl", "")
print(attr.target_name)  # .profile
print(oct(attr.perm()))  # 0o700
print(attr.template)     # True
```

```python
from homestate.entrytypeset import EntryTypeSet

include = EntryTypeSet.parse("noscripts,nosymlinks")
print(include)  # dirs,files,remove
```

## What it does not do

- There is no command-line program; everything here is a library.
- There is no serialisation layer: state and configuration are not written
  out as JSON, TOML or YAML by this package.
- The only working encryption backend is `AgeEncryption`, and it needs the
  `age` command on your `PATH`; there is no GnuPG backend and no built-in
  cryptography.
- There is no system that writes to the real filesystem, and none that
  collects intended changes into a data dump; `DryRunSystem` only notes that
  changes were requested.