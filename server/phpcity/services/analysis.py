import os
import concurrent.futures
from pathlib import Path
from typing import Dict, List, Union

from pathspec import PathSpec

from phpcity.config import DEFAULT_MAX_WORKERS, FILE_TIMEOUT_SECONDS, IGNORE_DIRS, SOURCE_EXTENSIONS
from phpcity.errors import InvalidInputError
from phpcity.models import Category, ScanSummary, TypeMetrics
from phpcity.services.extractor import StructuralExtractor
from phpcity.services.php_syntax import PhpSyntaxAdapter

_php_adapter = None
_extractor = StructuralExtractor()

def get_php_adapter():
    global _php_adapter
    if _php_adapter is None:
        _php_adapter = PhpSyntaxAdapter()
    return _php_adapter

def find_repo_root(start_path: Path) -> Path:
    current = start_path.resolve()
    for parent in [current, *current.parents]:
        if (parent / ".git").exists(): return parent
    return current

def is_source_file(name: str) -> bool:
    return Path(name).suffix.lower() in SOURCE_EXTENSIONS


def _translate_gitignore_pattern(raw_line: str, base_rel: str) -> str | None:
    """
    Translate a single .gitignore pattern that lives in a directory `base_rel`
    (relative to the repo root) into a repo-root-relative gitwildmatch pattern.

    This approximates Git's semantics including:
    - patterns starting with '!' (negation)
    - patterns starting with '/' (anchored to the .gitignore directory)
    - patterns without '/' applying within the directory subtree
    """
    line = raw_line.rstrip("\n")
    if not line or line.lstrip().startswith("#"):
        return None

    negated = line.startswith("!")
    body = line[1:] if negated else line

    if body.startswith("/"):
        body = body[1:]

    prefix = f"{base_rel}/" if base_rel else ""

    if "/" in body:
        pat = prefix + body
    else:
        pat = f"{base_rel}/**/{body}" if base_rel else f"**/{body}"

    return f"!{pat}" if negated else pat


def _load_gitignore_spec(root_path: Path) -> tuple[Path, PathSpec | None]:
    """
    Load a PathSpec for every .gitignore visible from `root_path`, nested
    ones included. Patterns are anchored at the repository root, so scanning
    a sub-directory of a repository still honours the repo-level rules.
    """
    repo_root = find_repo_root(root_path)

    all_patterns: list[str] = []

    for dirpath, dirnames, filenames in os.walk(repo_root):
        if ".git" in dirnames:
            dirnames.remove(".git")

        if ".gitignore" not in filenames:
            continue

        gitignore_file = Path(dirpath) / ".gitignore"
        base_rel = (
            str(Path(dirpath).relative_to(repo_root).as_posix())
            if Path(dirpath) != repo_root
            else ""
        )

        with open(gitignore_file, "r", encoding="utf-8", errors="replace") as f:
            for raw in f:
                translated = _translate_gitignore_pattern(raw, base_rel)
                if translated is not None:
                    all_patterns.append(translated)

    if not all_patterns:
        return repo_root, None

    spec = PathSpec.from_lines("gitwildmatch", all_patterns)
    return repo_root, spec


def _is_gitignored(path: Path, ignore_root: Path, spec: PathSpec | None) -> bool:
    if spec is None:
        return False

    try:
        rel = path.resolve().relative_to(ignore_root)
    except ValueError:
        rel = path

    return spec.match_file(rel.as_posix())


def collect_source_files(root_path: Path, respect_gitignore: bool = True) -> list[str]:
    """
    Walk `root_path` and return the PHP files to analyze, in a stable
    (sorted) order.
    """
    ignore_root, gitignore_spec = (
        _load_gitignore_spec(root_path) if respect_gitignore else (root_path, None)
    )

    def _report_walk_error(error: OSError) -> None:
        print(f"⚠️ Skipping unreadable path {error.filename}: {error.strerror}", flush=True)

    files_to_scan: list[str] = []

    for root_dir, dirs, files in os.walk(root_path, onerror=_report_walk_error):
        root_dir_path = Path(root_dir)

        # Prune in place so os.walk never descends into ignored directories.
        dirs[:] = sorted(
            d for d in dirs
            if d not in IGNORE_DIRS
            and not _is_gitignored(root_dir_path / d, ignore_root, gitignore_spec)
        )

        for file in sorted(files):
            if not is_source_file(file):
                continue
            file_path = root_dir_path / file
            if _is_gitignored(file_path, ignore_root, gitignore_spec):
                continue
            files_to_scan.append(str(file_path))

    return files_to_scan


def analyze_single_file(file_path: str, root_path: str, all_types: bool = False):
    """
    Extract the records of one file without ever raising.

    Returns a list of `TypeMetrics` (empty when the file declares no type) or
    an error dict. Must be top-level for multiprocessing pickling.
    """
    try:
        tree = get_php_adapter().parse_file(file_path)
        rel_path = Path(file_path).relative_to(root_path).as_posix()
        if all_types:
            return _extractor.extract_all(tree, rel_path)
        record = _extractor.extract(tree, rel_path)
        return [record] if record is not None else []
    except Exception as e:
        return {"error": str(e), "filename": file_path}


def _run_file_analyses(
    files_to_scan: list[str],
    root_path: str,
    all_types: bool,
    max_workers: int,
) -> Dict[str, Union[List[TypeMetrics], dict]]:
    results: Dict[str, Union[List[TypeMetrics], dict]] = {}
    total_count = len(files_to_scan)

    if max_workers <= 1 or total_count <= 1:
        for index, file in enumerate(files_to_scan, start=1):
            results[file] = analyze_single_file(file, root_path, all_types)
            _report_file_result(file, results[file], index, total_count)
        return results

    executor = concurrent.futures.ProcessPoolExecutor(max_workers=max_workers)
    future_to_file = {
        executor.submit(analyze_single_file, f, root_path, all_types): f for f in files_to_scan
    }
    pending = set(future_to_file)
    completed_count = 0

    try:
        while pending:
            done, pending = concurrent.futures.wait(
                pending,
                timeout=FILE_TIMEOUT_SECONDS,
                return_when=concurrent.futures.FIRST_COMPLETED,
            )

            if not done:
                # Nothing finished within the timeout: the remaining files are stuck.
                for future in pending:
                    future.cancel()
                    file = future_to_file[future]
                    completed_count += 1
                    results[file] = {"error": "timed out", "filename": file}
                    _report_file_result(file, results[file], completed_count, total_count)
                break

            for future in done:
                file = future_to_file[future]
                completed_count += 1
                try:
                    results[file] = future.result()
                except Exception as exc:
                    results[file] = {"error": str(exc), "filename": file}
                _report_file_result(file, results[file], completed_count, total_count)
    finally:
        # Do not block on workers still chewing on a timed out file.
        executor.shutdown(wait=not pending, cancel_futures=True)

    return results


def _report_file_result(file: str, result, index: int, total: int) -> None:
    if isinstance(result, dict) and "error" in result:
        print(f"❌ [{index}/{total}] Error analyzing {file}: {result['error']}", flush=True)
    else:
        print(f"✅ [{index}/{total}] Analyzed {file}", flush=True)


def scan_project(
    root_path: Union[str, Path],
    max_workers: int = DEFAULT_MAX_WORKERS,
    respect_gitignore: bool = True,
    all_types: bool = False,
) -> List[TypeMetrics]:
    """
    Extract every type record under `root_path`.

    Raises InvalidInputError when the directory is missing or unreadable.
    Files that fail to parse are reported and skipped.
    """
    root_path = Path(root_path)
    if not root_path.is_dir() or not os.access(root_path, os.R_OK | os.X_OK):
        raise InvalidInputError(f"The directory '{root_path}' could not be found or accessed")

    print(f"🔍 Scanning: {root_path}", flush=True)
    files_to_scan = collect_source_files(root_path, respect_gitignore)
    print(f"📂 Analyzing {len(files_to_scan)} PHP files...", flush=True)

    results = _run_file_analyses(files_to_scan, str(root_path), all_types, max_workers)

    # Walk order, not completion order: the hierarchy keeps input order.
    records: List[TypeMetrics] = []
    for file in files_to_scan:
        result = results.get(file)
        if isinstance(result, list):
            records.extend(result)

    return records


def summarize(records: List[TypeMetrics]) -> ScanSummary:
    return ScanSummary(
        total=len(records),
        classes=sum(1 for r in records if r.category == Category.CLASS),
        interfaces=sum(1 for r in records if r.category == Category.INTERFACE),
        abstract_classes=sum(1 for r in records if r.is_abstract),
        traits=sum(1 for r in records if r.is_trait),
    )
