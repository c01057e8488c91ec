from __future__ import annotations

from fastapi import APIRouter

from answer_engine import question_types_for
from bank import Variant, get_templates, load_error
from schemas.templates import TemplateListOut

router = APIRouter(tags=["templates"])


@router.get("/templates/{variant}", response_model=TemplateListOut)
def list_templates(variant: Variant):
    templates = get_templates(variant)
    return {
        "variant": variant.value,
        "count": len(templates),
        "supported_types": question_types_for(variant.value),
        "templates": [t.model_dump() for t in templates],
        "error": load_error(variant),
    }
