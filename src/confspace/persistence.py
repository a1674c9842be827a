"""Storing configurations next to their run results and matching them later."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Mapping

from confspace.configuration import Configuration
from confspace.errors import ConfigErrorCode, ConfigurationError
from confspace.loader import dump_properties, read_properties

CONFIGURATION_FILENAME = "configuration.properties"


def save_configuration(conf: Mapping[str, str], path: Path | str) -> Path:
    """Write ``conf`` as sorted, escaped ``name=value`` lines under a timestamp comment."""

    out = Path(path)
    stamp = datetime.now().isoformat(timespec="seconds")
    text = dump_properties({name: conf[name] for name in sorted(conf)}, comment=f"{stamp} #")
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            ConfigErrorCode.IO_ERROR,
            ctx={"path": str(out), "error": "could not save configuration"},
            cause=exc,
        )
    return out


def load_stored_configuration(path: Path | str) -> Configuration:
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            ConfigErrorCode.IO_ERROR,
            ctx={"path": str(source), "error": "could not read stored configuration"},
            cause=exc,
        )
    return Configuration(read_properties(text))


def find_matching_run(conf: Configuration, root: Path | str) -> Path | None:
    """Return the run directory under ``root`` storing exactly ``conf``'s parameters.

    Two configurations are the same job iff all key/value pairs match.
    """

    base = Path(root)
    if not base.is_dir():
        return None
    for run_dir in sorted(p for p in base.iterdir() if p.is_dir()):
        stored_path = run_dir / CONFIGURATION_FILENAME
        if not stored_path.is_file():
            continue
        if conf.same_parameters(load_stored_configuration(stored_path)):
            return run_dir
    return None
