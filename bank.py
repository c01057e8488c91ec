# services/quiz/bank.py

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

_BASE = Path(__file__).resolve().parent
_DEFAULT_DIR = _BASE / "data" / "templates"


class Variant(str, Enum):
    NARRATION = "narration"
    TABLE = "table"


class TemplateModel(BaseModel):
    model_config = ConfigDict(frozen=True)
    type: str
    template: str
    variables: Tuple[str, ...] = ()


class TemplateLoadError(Exception):
    pass


def templates_dir() -> Path:
    return Path(os.getenv("QUIZ_TEMPLATES_DIR") or _DEFAULT_DIR)


def _iter_jsonl(p: Path) -> Iterable[Dict[str, Any]]:
    with p.open("rb") as f:
        for idx, raw in enumerate(f, 1):
            try:
                s = raw.decode("utf-8").strip()
            except UnicodeDecodeError:
                logger.warning("Skipping non UTF-8 template row %s:%d", p.name, idx)
                continue
            if not s or s.startswith("#") or s.startswith("//"):
                continue
            try:
                yield json.loads(s)
            except json.JSONDecodeError:
                # skip the row, keep the shard
                logger.warning("Skipping malformed template row %s:%d", p.name, idx)
                continue


def _iter_json(p: Path) -> Iterable[Dict[str, Any]]:
    with p.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise TemplateLoadError(f"{p.name}: {e}") from e
    if not isinstance(data, list):
        raise TemplateLoadError(f"{p.name}: expected a list of templates")
    yield from data


def _sources(variant: Variant) -> List[Path]:
    # Prefer a sharded directory (templates/<variant>/*.json[l]), else <variant>.json
    root = templates_dir()
    shard_dir = root / variant.value
    if shard_dir.is_dir():
        return [
            p
            for p in sorted(shard_dir.rglob("*"))
            if p.is_file() and p.suffix.lower() in (".json", ".jsonl")
        ]
    single = root / f"{variant.value}.json"
    return [single] if single.exists() else []


def _load_variant(variant: Variant) -> Tuple[List[TemplateModel], Optional[str]]:
    templates: List[TemplateModel] = []
    errors: List[str] = []

    paths = _sources(variant)
    if not paths:
        errors.append(f"no template source for {variant.value!r} under {templates_dir()}")

    for p in paths:
        source = _iter_jsonl(p) if p.suffix.lower() == ".jsonl" else _iter_json(p)
        try:
            for raw in source:
                try:
                    templates.append(TemplateModel(**raw))
                except (ValidationError, TypeError):
                    logger.warning("Skipping invalid template in %s: %r", p.name, raw)
                    continue
        except (OSError, TemplateLoadError) as e:
            errors.append(str(e))

    error = "; ".join(errors) or None
    if error:
        logger.error("Could not load %s templates: %s", variant.value, error)
    return templates, error


class TemplateCatalog:
    _templates: Dict[Variant, Tuple[TemplateModel, ...]] = {}
    _errors: Dict[Variant, Optional[str]] = {}

    @classmethod
    def load(cls, variant: Variant) -> Tuple[TemplateModel, ...]:
        variant = Variant(variant)
        if variant not in cls._templates:
            cls._reload_one(variant)
        return cls._templates[variant]

    @classmethod
    def last_error(cls, variant: Variant) -> Optional[str]:
        cls.load(variant)
        return cls._errors.get(Variant(variant))

    @classmethod
    def _reload_one(cls, variant: Variant) -> int:
        templates, error = _load_variant(variant)
        cls._templates[variant] = tuple(templates)
        cls._errors[variant] = error
        return len(templates)

    @classmethod
    def reload(cls) -> Dict[str, int]:
        return {v.value: cls._reload_one(v) for v in Variant}


# Public API
def get_templates(variant: Variant) -> Tuple[TemplateModel, ...]:
    return TemplateCatalog.load(variant)


def load_error(variant: Variant) -> Optional[str]:
    return TemplateCatalog.last_error(variant)


def reload_bank() -> Dict[str, int]:
    return TemplateCatalog.reload()
