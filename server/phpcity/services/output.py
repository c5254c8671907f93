import re
from pathlib import Path
from typing import List, Sequence, Union

from pydantic import TypeAdapter, ValidationError

from phpcity.config import DEFAULT_OUTPUT_DIR
from phpcity.errors import InvalidInputError, OutputWriteError
from phpcity.models import LayoutResult, TypeMetrics

RECORDS_ADAPTER = TypeAdapter(List[TypeMetrics])

_UNSAFE_NAME_CHARS = re.compile(r"[^\w\s\-~,;\[\]().]", re.ASCII)


def sanitize_project_name(project_name: str) -> str:
    return _UNSAFE_NAME_CHARS.sub("-", project_name)


def dump_records(records: Sequence[TypeMetrics]) -> bytes:
    return RECORDS_ADAPTER.dump_json(list(records), indent=4, by_alias=True)


def write_records_json(
    records: Sequence[TypeMetrics],
    project_name: str,
    output_dir: Union[str, Path] = DEFAULT_OUTPUT_DIR,
) -> Path:
    """
    Persist the record array as `<output_dir>/<sanitized name>.json` and
    return the written path.
    """
    output_path = Path(output_dir) / f"{sanitize_project_name(project_name)}.json"
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(dump_records(records))
    except OSError as e:
        raise OutputWriteError(output_path, str(e)) from e
    print(f"✅ Saved {len(records)} records to {output_path}", flush=True)
    return output_path


def load_records(path: Union[str, Path]) -> List[TypeMetrics]:
    path = Path(path)
    try:
        return RECORDS_ADAPTER.validate_json(path.read_bytes())
    except OSError as e:
        raise InvalidInputError(f"Could not read '{path}': {e}") from e
    except ValidationError as e:
        raise InvalidInputError(f"'{path}' is not a valid record file: {e}") from e


def list_projects(output_dir: Union[str, Path]) -> List[str]:
    output_dir = Path(output_dir)
    if not output_dir.is_dir():
        return []
    return sorted(p.stem for p in output_dir.glob("*.json") if p.is_file())


def write_layout_json(layout: LayoutResult, path: Union[str, Path]) -> Path:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(layout.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(path, str(e)) from e
    return path
