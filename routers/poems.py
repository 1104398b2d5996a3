from typing import List, Optional

from fastapi import APIRouter, Depends

from core.config import settings
from core.errors import PoemError, ValidationFailed
from dependencies.auth import get_current_identity, get_current_identity_optional, get_poem_service
from dependencies.errors import http_error
from schemas import ActionResult, CompositionDraft, Identity, Poem, PoemComposeRequest, PoemId, PoemTextUpdate
from services.appreciation_service import AppreciationService
from services.auth_service import AuthService
from services.composer import Composer
from services.poem_service import PoemService

router = APIRouter(prefix="/api/poems", tags=["poems"])


@router.get("", response_model=List[Poem])
async def list_poems(service: PoemService = Depends(get_poem_service)):
    try:
        return await service.list_poems()
    except PoemError as e:
        raise http_error(e) from None


@router.get("/{poem_id}", response_model=Poem)
async def get_poem(poem_id: PoemId, service: PoemService = Depends(get_poem_service)):
    try:
        return await service.get_poem(poem_id)
    except PoemError as e:
        raise http_error(e) from None


@router.post("", response_model=ActionResult, status_code=201)
async def create_poem(
    poem_in: PoemComposeRequest,
    service: PoemService = Depends(get_poem_service),
    identity: Identity = Depends(get_current_identity),
):
    draft = CompositionDraft(kind=poem_in.kind, author=poem_in.author)
    for slot, value in enumerate(poem_in.lines, start=1):
        Composer.set_line(draft, slot, value)

    try:
        try:
            Composer.set_position(draft, poem_in.lat, poem_in.lon)
        except ValueError:
            raise ValidationFailed("地図上の有効な場所を選んでください。") from None
        author = Composer.resolve_author(draft, identity, anonymous=settings.ANONYMOUS_SIGNATURE)
        # Владелец берётся только из проверенного токена
        poem = await service.create_poem(Composer.build_submission(draft, author), identity.handle)
    except PoemError as e:
        raise http_error(e) from None
    return ActionResult(success=True, message="この場所に歌を詠みました。", poem=poem)


@router.patch("/{poem_id}", response_model=ActionResult)
async def edit_poem(
    poem_id: PoemId,
    update: PoemTextUpdate,
    service: PoemService = Depends(get_poem_service),
    identity: Optional[Identity] = Depends(get_current_identity_optional),
):
    try:
        poem = await service.get_poem(poem_id)
        AuthService.ensure_can_mutate(poem, identity)
        text = Composer.validate_text(poem.kind, update.text)
        updated = await service.update_text(poem_id, text)
    except PoemError as e:
        raise http_error(e) from None
    return ActionResult(success=True, message="歌を修正しました。", poem=updated)


@router.delete("/{poem_id}", response_model=ActionResult)
async def delete_poem(
    poem_id: PoemId,
    service: PoemService = Depends(get_poem_service),
    identity: Optional[Identity] = Depends(get_current_identity_optional),
):
    try:
        poem = await service.get_poem(poem_id)
        AuthService.ensure_can_mutate(poem, identity)
        await service.delete_poem(poem_id)
    except PoemError as e:
        raise http_error(e) from None
    return ActionResult(success=True, message="歌を削除しました。")


@router.post("/{poem_id}/appreciation", response_model=ActionResult)
async def toggle_appreciation(
    poem_id: PoemId,
    service: PoemService = Depends(get_poem_service),
    identity: Identity = Depends(get_current_identity),
):
    try:
        poem = await service.get_poem(poem_id)
        action, next_set = AppreciationService.toggle(poem, identity)
        updated = await service.update_appreciation(poem_id, next_set)
    except PoemError as e:
        raise http_error(e) from None
    return ActionResult(success=True, message=action, poem=updated)
