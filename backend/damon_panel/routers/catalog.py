"""Category and device paths."""
from ..routing import PathRouter, RequestContext
from ..schemas import (
    CategoryCreate,
    CategoryUpdate,
    DeviceCreate,
    DeviceSearchRequest,
    DeviceUpdate,
    IdRequest,
)
from ..use_cases.catalog import (
    create_category_use_case,
    create_device_use_case,
    delete_category_use_case,
    delete_device_use_case,
    list_categories_use_case,
    list_devices_use_case,
    search_devices_use_case,
    update_category_use_case,
    update_device_use_case,
)

admin_categories = PathRouter(prefix="/admin/categories")
admin_devices = PathRouter(prefix="/admin/devices")
router = PathRouter()


@admin_categories.path("/list", permission="canManageCatalog")
def list_all_categories(ctx: RequestContext):
    return list_categories_use_case(db=ctx.db)


@admin_categories.path("/create", permission="canManageCatalog")
def create_category(ctx: RequestContext):
    category = create_category_use_case(
        db=ctx.db, payload=ctx.parse(CategoryCreate), current_user=ctx.actor, client=ctx.client
    )
    return {"id": category.id}


@admin_categories.path("/update", permission="canManageCatalog")
def update_category(ctx: RequestContext):
    update_category_use_case(db=ctx.db, payload=ctx.parse(CategoryUpdate), current_user=ctx.actor, client=ctx.client)
    return {"updated": True}


@admin_categories.path("/delete", permission="canManageCatalog")
def delete_category(ctx: RequestContext):
    payload = ctx.parse(IdRequest)
    delete_category_use_case(db=ctx.db, category_id=payload.id, current_user=ctx.actor, client=ctx.client)
    return {"deleted": True}


@admin_devices.path("/list", permission="canManageCatalog")
def list_all_devices(ctx: RequestContext):
    return list_devices_use_case(db=ctx.db)


@admin_devices.path("/create", permission="canManageCatalog")
def create_device(ctx: RequestContext):
    device = create_device_use_case(
        db=ctx.db, payload=ctx.parse(DeviceCreate), current_user=ctx.actor, client=ctx.client
    )
    return {"id": device.id}


@admin_devices.path("/update", permission="canManageCatalog")
def update_device(ctx: RequestContext):
    update_device_use_case(db=ctx.db, payload=ctx.parse(DeviceUpdate), current_user=ctx.actor, client=ctx.client)
    return {"updated": True}


@admin_devices.path("/delete", permission="canManageCatalog")
def delete_device(ctx: RequestContext):
    payload = ctx.parse(IdRequest)
    delete_device_use_case(db=ctx.db, device_id=payload.id, current_user=ctx.actor, client=ctx.client)
    return {"deleted": True}


@router.path("/categories/list")
def list_active_categories(ctx: RequestContext):
    return list_categories_use_case(db=ctx.db, active_only=True)


@router.path("/devices/search")
def search_devices(ctx: RequestContext):
    """Active devices by category and model-name substring."""
    return search_devices_use_case(db=ctx.db, payload=ctx.parse(DeviceSearchRequest))
