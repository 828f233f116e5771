from fastapi import APIRouter, Depends

from formsapp.auth import get_session
from formsapp.models.tags import CreateTagRequest, TagInfo
from formsapp.models.users import Session
from formsapp.services import lookup

router = APIRouter(prefix="/api/tags", tags=["tags"])


@router.get("")
def search_tags(search: str = "", session: Session = Depends(get_session)) -> list[str]:
    return lookup.search_tags(search)


@router.post("", status_code=201)
def create_tag(request: CreateTagRequest, session: Session = Depends(get_session)) -> TagInfo:
    return TagInfo(name=lookup.create_tag(request.name))


@router.get("/cloud")
def tag_cloud(session: Session = Depends(get_session)) -> dict[str, int]:
    return lookup.tag_cloud()
