"""
Build step (directory tree -> JSON indexes).

- Scans courses/<courseSlug>/<YEAR>/* and writes
  - data/course-<courseSlug>.json (one per course)
  - data/courses.json (list of all courses)
- Scans questions/<courseName>/**/*.json and writes
  - data/questions-<slugify(courseName)>.json

Important rules (DO NOT CHANGE):
- Only four-digit year folders are indexed, newest first
- Only files with an allowed extension are listed
- slugify() must stay identical to apfrq.model.slugify (it is the same function)
"""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from apfrq.loader import encode_component
from apfrq.model import slugify


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

# The project root is the directory the site is served from:
#   <root>/courses/, <root>/questions/, <root>/data/
DEFAULT_ROOT = Path.cwd()

ALLOWED_EXT = {".pdf", ".png", ".jpg", ".jpeg", ".webp", ".txt", ".html"}


class BuildError(Exception):
    """
    Raised when a required input folder is missing.
    """


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _is_year_folder(path: Path) -> bool:
    name = path.name
    return path.is_dir() and len(name) == 4 and name.isascii() and name.isdigit()


def _write_json(path: Path, payload: Any) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# Course indexes
# ---------------------------------------------------------------------------


def build_course_index(course_dir: Path) -> Dict[str, Any]:
    """
    Build the index of one course folder.
    """
    slug = course_dir.name
    base_path = f"/courses/{encode_component(slug)}"

    years = sorted((p for p in course_dir.iterdir() if _is_year_folder(p)), key=lambda p: int(p.name), reverse=True)

    year_entries: List[Dict[str, Any]] = []
    for year_dir in years:
        files = sorted(
            (p.name for p in year_dir.iterdir() if p.is_file() and p.suffix.lower() in ALLOWED_EXT),
            key=lambda n: (n.lower(), n),
        )
        year_entries.append(
            {
                "year": year_dir.name,
                "files": [
                    {
                        "name": fname,
                        "url": f"{base_path}/{encode_component(year_dir.name)}/{encode_component(fname)}",
                    }
                    for fname in files
                ],
            }
        )

    return {
        "slug": slug,
        "title": slug,
        "basePath": base_path,
        "generatedAt": _now_iso(),
        "years": year_entries,
    }


def build_course_indexes(root: Path = DEFAULT_ROOT, out_dir: Path | None = None) -> List[Dict[str, str]]:
    """
    Write one index per course plus courses.json. Returns the course list.
    """
    courses_dir = (root / "courses").resolve()
    out_path = (out_dir or root / "data").resolve()

    if not courses_dir.is_dir():
        raise BuildError(f"Missing folder: {courses_dir} (create courses/<courseSlug>/<YEAR>/... first)")

    out_path.mkdir(parents=True, exist_ok=True)

    course_dirs = sorted((p for p in courses_dir.iterdir() if p.is_dir()), key=lambda p: (p.name.lower(), p.name))

    courses: List[Dict[str, str]] = []
    for course_dir in course_dirs:
        idx = build_course_index(course_dir)
        out_file = out_path / f"course-{idx['slug']}.json"
        _write_json(out_file, idx)
        courses.append({"slug": idx["slug"], "title": idx["title"]})
        print(f"Wrote: {out_file}")

    master_file = out_path / "courses.json"
    _write_json(master_file, {"generatedAt": _now_iso(), "courses": courses})
    print(f"Wrote: {master_file}")
    print(f"Courses indexed: {len(courses)}")
    return courses


# ---------------------------------------------------------------------------
# Question indexes
# ---------------------------------------------------------------------------


def parse_question_record(raw: Any, json_path: Path, root: Path) -> Dict[str, Any] | None:
    """
    Turn one question metadata file into a question record.

    Returns None if the minimum fields (year, units list) are missing.
    """
    if not isinstance(raw, dict):
        return None
    if not raw.get("year") or not isinstance(raw.get("units"), list):
        return None

    try:
        year = float(raw["year"])
    except (TypeError, ValueError):
        return None
    if not math.isfinite(year):
        return None

    qt = raw.get("question_type")
    qt_norm = None if qt is None else (str(qt).strip() or None)

    base = json_path.stem
    rel_dir = json_path.parent.resolve().relative_to(root.resolve()).as_posix()

    return {
        "year": int(year) if year.is_integer() else year,
        "question_type": qt_norm,
        "units": raw["units"],
        "file_base": base,
        "question_pdf": f"/{rel_dir}/{base}.pdf",
    }


def build_question_index(course_dir: Path, root: Path) -> Dict[str, Any]:
    questions: List[Dict[str, Any]] = []
    units: set[str] = set()
    types: set[str] = set()

    for json_path in sorted(course_dir.rglob("*.json")):
        if not json_path.is_file():
            continue
        try:
            raw = json.loads(json_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError):
            print(f"Skipping invalid JSON: {json_path}")
            continue

        record = parse_question_record(raw, json_path, root)
        if record is None:
            continue

        units.update(str(u) for u in record["units"])
        if record["question_type"]:
            types.add(record["question_type"])
        questions.append(record)

    # newest first; sorted() is stable so equal years keep file order
    questions.sort(key=lambda q: q["year"], reverse=True)

    return {
        "course": course_dir.name,
        "question_types": sorted(types),
        "units": sorted(units),
        "questions": questions,
    }


def build_question_indexes(root: Path = DEFAULT_ROOT, out_dir: Path | None = None) -> Dict[str, int]:
    """
    Write one questions-<slug>.json per course folder under questions/.
    Returns {slug: number of questions}.
    """
    questions_dir = (root / "questions").resolve()
    out_path = (out_dir or root / "data").resolve()

    if not questions_dir.is_dir():
        raise BuildError(f"Missing questions directory: {questions_dir}")

    out_path.mkdir(parents=True, exist_ok=True)

    built: Dict[str, int] = {}
    for course_dir in sorted(p for p in questions_dir.iterdir() if p.is_dir()):
        slug = slugify(course_dir.name)
        output = build_question_index(course_dir, root)
        _write_json(out_path / f"questions-{slug}.json", output)
        built[slug] = len(output["questions"])
        print(f"Built questions-{slug}.json ({built[slug]} questions)")

    return built


# ---------------------------------------------------------------------------
# CLI connection
# ---------------------------------------------------------------------------


def build_all(root: Path = DEFAULT_ROOT, out_dir: Path | None = None, questions: bool = True) -> None:
    build_course_indexes(root, out_dir)
    if questions:
        if (root / "questions").is_dir():
            build_question_indexes(root, out_dir)
        else:
            print(f"No questions/ folder in {root.resolve()}, skipping topic indexes.")

