"""
Department Routes

GET /departments - List departments (public)
GET /departments/{department_id} - Department details (public)
POST /departments - Create (admin)
PUT /departments/{department_id} - Update (admin)
DELETE /departments/{department_id} - Delete (admin)
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Depends

from portal.core.auth import get_current_admin
from portal.schemas.schemas import DepartmentCreate, DepartmentUpdate, to_document
from portal.services.catalog_service import DepartmentService
from portal.services.mongo_service import serialize_doc, serialize_docs

router = APIRouter(prefix="/departments", tags=["Departments"])


@router.get("")
async def list_departments(is_active: Optional[bool] = None):
    departments = DepartmentService().list(is_active=is_active)
    return {"success": True, "count": len(departments), "departments": serialize_docs(departments)}


@router.get("/{department_id}")
async def get_department(department_id: str):
    doc = DepartmentService().get_or_404(department_id, "Department")
    return {"success": True, "department": serialize_doc(doc)}


@router.post("", status_code=201)
async def create_department(data: DepartmentCreate, admin: dict = Depends(get_current_admin)):
    doc = DepartmentService().create(to_document(data))
    return {"success": True, "message": "Department created", "department": serialize_doc(doc)}


@router.put("/{department_id}")
async def update_department(department_id: str, data: DepartmentUpdate, admin: dict = Depends(get_current_admin)):
    service = DepartmentService()
    service.get_or_404(department_id, "Department")
    updates = to_document(data, exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    doc = service.update(department_id, updates)
    return {"success": True, "message": "Department updated", "department": serialize_doc(doc)}


@router.delete("/{department_id}")
async def delete_department(department_id: str, admin: dict = Depends(get_current_admin)):
    if not DepartmentService().delete(department_id):
        raise HTTPException(status_code=404, detail="Department not found")
    return {"success": True, "message": "Department deleted"}
