"""
Skill Catalog Routes

GET /skills - List skills, most used first (public)
GET /skills/categories - Categories in use (public)
POST /skills - Add skill (admin)
PUT /skills/{skill_id} - Update skill (admin)
DELETE /skills/{skill_id} - Delete skill (admin)
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Depends

from portal.core.auth import get_current_admin
from portal.schemas.schemas import SkillCreate, SkillUpdate, SkillCategory, to_document
from portal.services.catalog_service import SkillService
from portal.services.mongo_service import serialize_doc, serialize_docs

router = APIRouter(prefix="/skills", tags=["Skills"])


@router.get("")
async def list_skills(
    category: Optional[SkillCategory] = None,
    search: Optional[str] = None,
    is_active: bool = True,
):
    skills = SkillService().list(category=category.value if category else None, search=search, is_active=is_active)
    return {"success": True, "count": len(skills), "skills": serialize_docs(skills)}


@router.get("/categories")
async def skill_categories():
    return {"success": True, "categories": SkillService().categories()}


@router.post("", status_code=201)
async def create_skill(data: SkillCreate, admin: dict = Depends(get_current_admin)):
    doc = SkillService().create(to_document(data))
    return {"success": True, "message": "Skill created", "skill": serialize_doc(doc)}


@router.put("/{skill_id}")
async def update_skill(skill_id: str, data: SkillUpdate, admin: dict = Depends(get_current_admin)):
    service = SkillService()
    service.get_or_404(skill_id, "Skill")
    updates = to_document(data, exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    doc = service.update(skill_id, updates)
    return {"success": True, "message": "Skill updated", "skill": serialize_doc(doc)}


@router.delete("/{skill_id}")
async def delete_skill(skill_id: str, admin: dict = Depends(get_current_admin)):
    if not SkillService().delete(skill_id):
        raise HTTPException(status_code=404, detail="Skill not found")
    return {"success": True, "message": "Skill deleted"}
