from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..dependencies import get_category_service
from ..schemas.category import Category, CategoryCreate, CategoryUpdate
from ..services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=list[Category])
async def list_categories(categories: CategoryService = Depends(get_category_service)):
    return await categories.get_all()


@router.post("/", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(payload: CategoryCreate, categories: CategoryService = Depends(get_category_service)):
    return await categories.create(payload)


@router.get("/{category_id}", response_model=Category)
async def get_category(category_id: int, categories: CategoryService = Depends(get_category_service)):
    category = await categories.get_by_id(category_id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.patch("/{category_id}", response_model=Category)
async def update_category(
    category_id: int,
    payload: CategoryUpdate,
    categories: CategoryService = Depends(get_category_service),
):
    category = await categories.update(category_id, payload)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: int, categories: CategoryService = Depends(get_category_service)):
    if not await categories.delete(category_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
