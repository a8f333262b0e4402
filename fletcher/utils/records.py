"""
Record storage for master records, profiles, job analyses and generated .tex files.

Master records and profiles are YAML files read through OmegaConf. Job analyses
are saved as JSON in the extraction wire format so they can be re-used without
another LLM call.

Default layout under $DATA_PATH:

    data/
    ├── master.yaml
    └── profiles/
        ├── frontend.yaml
        └── fullstack.yaml
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from fletcher.contexts.intake.job_analysis import JobAnalysis
from fletcher.contexts.templating.resume_data_structure import MasterRecord, Profile
from fletcher.utils.exceptions import InvalidRecordError, JobAnalysisError
from fletcher.utils.text_processing import slugify
from fletcher.utils.timestamp import today

load_dotenv()
DATA_PATH = Path(os.getenv("DATA_PATH", "data"))
OUTPUT_PATH = Path(os.getenv("OUTPUT_PATH", "outs/results"))

MASTER_RECORD_FILE = "master.yaml"
PROFILES_DIR = "profiles"
PROFILE_SUFFIXES = (".yaml", ".yml")


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML mapping into plain Python containers."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Record not found: {path}")
    data = OmegaConf.to_container(OmegaConf.load(path), resolve=True)
    if not isinstance(data, dict):
        raise InvalidRecordError(f"{path} must contain a YAML mapping")
    return data


def load_master_record(path: Optional[Path] = None) -> MasterRecord:
    """
    Load the master record.

    Args:
        path: YAML file (default: $DATA_PATH/master.yaml)

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidRecordError: If the record has the wrong shape
    """
    path = Path(path) if path is not None else DATA_PATH / MASTER_RECORD_FILE
    return MasterRecord.from_dict(_load_yaml(path))


def load_profile(path: Path) -> Profile:
    """Load one profile YAML file."""
    return Profile.from_dict(_load_yaml(path))


def list_profiles(profiles_dir: Optional[Path] = None) -> List[Path]:
    """
    Profile files in a directory, sorted by file name.

    Args:
        profiles_dir: Directory to scan (default: $DATA_PATH/profiles)
    """
    profiles_dir = Path(profiles_dir) if profiles_dir is not None else DATA_PATH / PROFILES_DIR
    if not profiles_dir.is_dir():
        return []
    return sorted(p for p in profiles_dir.iterdir() if p.suffix in PROFILE_SUFFIXES)


def load_profiles(profiles_dir: Optional[Path] = None) -> List[Profile]:
    """Load every profile in a directory, in file name order."""
    return [load_profile(path) for path in list_profiles(profiles_dir)]


def load_job_analysis(path: Path) -> JobAnalysis:
    """
    Load a saved job analysis.

    Raises:
        JobAnalysisError: If the file is not valid JSON or fails validation
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise JobAnalysisError(f"Invalid job analysis file: {path}", hint=str(e)) from e
    return JobAnalysis.from_dict(payload)


def save_job_analysis(analysis: JobAnalysis, path: Path) -> Path:
    """Save a job analysis as JSON in the extraction wire format."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(analysis.to_dict(), indent=2) + "\n", encoding="utf-8")
    return path


def write_tex_file(slug: str, name: str, tex: str, output_dir: Optional[Path] = None) -> Path:
    """
    Write generated LaTeX to a dated output directory.

    Args:
        slug: Target identifier (usually the slugified company name)
        name: Candidate name, used in the file name
        tex: LaTeX source
        output_dir: Base directory (default: $OUTPUT_PATH)

    Returns:
        Path to the written file: <output_dir>/<YYYY-MM-DD>/<name>-<slug>.tex
    """
    base = Path(output_dir) if output_dir is not None else OUTPUT_PATH
    target_dir = base / today()
    target_dir.mkdir(parents=True, exist_ok=True)

    tex_path = target_dir / f"{slugify(name)}-{slugify(slug)}.tex"
    tex_path.write_text(tex, encoding="utf-8")
    return tex_path
