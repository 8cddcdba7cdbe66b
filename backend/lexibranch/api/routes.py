from fastapi import APIRouter, Depends, Response, status

from lexibranch.api.dependencies import Services, get_actor_id, get_services
from lexibranch.api.schemas import (
    BranchDiffOut,
    BranchListOut,
    BranchOut,
    CreateBranchIn,
    CreateKeyIn,
    CreateSpaceIn,
    KeyOut,
    MergeIn,
    MergeOut,
    SetTranslationsIn,
    SpaceOut,
    TranslationListOut,
    TranslationOut,
    conflict_entry_out,
)
from lexibranch.services.branches.resolutions import parse_resolutions
from lexibranch.services.events import drain

router = APIRouter(prefix="/api", tags=["branches"])


@router.post("/spaces", response_model=SpaceOut, status_code=status.HTTP_201_CREATED)
async def create_space(
    payload: CreateSpaceIn,
    actor_id: str = Depends(get_actor_id),
    services: Services = Depends(get_services),
) -> SpaceOut:
    result = services.spaces.create_space(
        project_id=payload.project_id,
        name=payload.name,
        description=payload.description,
        actor_id=actor_id,
    )
    return SpaceOut(
        **result.space.model_dump(exclude={"created_at", "updated_at"}),
        default_branch_id=result.default_branch.id,
    )


@router.get("/spaces/{space_id}/branches", response_model=BranchListOut)
async def list_branches(
    space_id: str,
    actor_id: str = Depends(get_actor_id),
    services: Services = Depends(get_services),
) -> BranchListOut:
    branches = services.branches.list_for_space(space_id, actor_id=actor_id)
    return BranchListOut(
        branches=[BranchOut(**branch.model_dump()) for branch in branches]
    )


@router.post(
    "/spaces/{space_id}/branches",
    response_model=BranchOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_branch(
    space_id: str,
    payload: CreateBranchIn,
    actor_id: str = Depends(get_actor_id),
    services: Services = Depends(get_services),
) -> BranchOut:
    result = services.branches.create(
        name=payload.name,
        space_id=space_id,
        from_branch_id=payload.from_branch_id,
        actor_id=actor_id,
    )
    drain(result.effects, services.publisher)
    return BranchOut(**result.branch.model_dump())


@router.get("/branches/{branch_id}", response_model=BranchOut)
async def get_branch(
    branch_id: str,
    actor_id: str = Depends(get_actor_id),
    services: Services = Depends(get_services),
) -> BranchOut:
    branch = services.branches.get(branch_id, actor_id=actor_id)
    return BranchOut(**branch.model_dump())


@router.delete("/branches/{branch_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_branch(
    branch_id: str,
    actor_id: str = Depends(get_actor_id),
    services: Services = Depends(get_services),
) -> Response:
    result = services.branches.delete(branch_id, actor_id=actor_id)
    drain(result.effects, services.publisher)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/branches/{branch_id}/diff/{target_id}", response_model=BranchDiffOut)
async def compute_diff(
    branch_id: str,
    target_id: str,
    actor_id: str = Depends(get_actor_id),
    services: Services = Depends(get_services),
) -> BranchDiffOut:
    diff = services.diff.compute_diff(branch_id, target_id, actor_id=actor_id)
    return BranchDiffOut.from_result(diff)


@router.get("/branches/{branch_id}/merge-preview/{target_id}", response_model=BranchDiffOut)
async def preview_merge(
    branch_id: str,
    target_id: str,
    actor_id: str = Depends(get_actor_id),
    services: Services = Depends(get_services),
) -> BranchDiffOut:
    diff = services.merge.preview_merge(branch_id, target_id, actor_id=actor_id)
    return BranchDiffOut.from_result(diff)


@router.post("/branches/{branch_id}/merge", response_model=MergeOut)
async def merge_branches(
    branch_id: str,
    payload: MergeIn,
    actor_id: str = Depends(get_actor_id),
    services: Services = Depends(get_services),
) -> MergeOut:
    resolutions = parse_resolutions(
        [item.model_dump() for item in payload.resolutions or []]
    )
    result = services.merge.merge(
        branch_id,
        payload.target_branch_id,
        resolutions,
        actor_id=actor_id,
    )
    if not result.success:
        return MergeOut(
            success=False,
            merged=result.merged,
            conflicts=[conflict_entry_out(entry) for entry in result.conflicts],
        )
    drain(result.effects, services.publisher)
    return MergeOut(success=True, merged=result.merged)


@router.post(
    "/branches/{branch_id}/keys",
    response_model=KeyOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_key(
    branch_id: str,
    payload: CreateKeyIn,
    actor_id: str = Depends(get_actor_id),
    services: Services = Depends(get_services),
) -> KeyOut:
    key = services.keys.create_key(
        branch_id=branch_id,
        name=payload.name,
        namespace=payload.namespace,
        description=payload.description,
        translations=payload.translations,
        actor_id=actor_id,
    )
    return KeyOut(
        **key.model_dump(exclude={"translations"}),
        translations=[
            TranslationOut(language=t.language, value=t.value, status=t.status)
            for t in key.translations
        ],
    )


@router.put("/keys/{key_id}/translations", response_model=TranslationListOut)
async def set_translations(
    key_id: str,
    payload: SetTranslationsIn,
    actor_id: str = Depends(get_actor_id),
    services: Services = Depends(get_services),
) -> TranslationListOut:
    translations = services.keys.set_translations(
        key_id, payload.translations, actor_id=actor_id
    )
    return TranslationListOut(
        translations=[
            TranslationOut(language=t.language, value=t.value, status=t.status)
            for t in translations
        ]
    )
