"""
Seed script to populate the module permission grid.

Creates one row per (editable role, registered module) that does not exist
yet. Existing rows are left alone, so the script can be re-run after new
modules are added to the registry.

Usage:
    uv run python -m scripts.seed_permissions
"""
import asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ward_admin.core.database.engine import get_db, init_db
from ward_admin.features.permissions.models import ModulePermission
from ward_admin.features.permissions.registry import EDITABLE_ROLES, MODULES
from ward_admin.utils import configure_logging, get_logger


log = get_logger("ward_admin.scripts.seed_permissions")


DEFAULT_GRANTS = {
    "manager": {"can_view": True, "can_add": True, "can_edit": True, "can_delete": True},
    "user": {"can_view": True, "can_add": True, "can_edit": True, "can_delete": False},
}


async def seed_module_permissions(
    db: AsyncSession,
    roles=EDITABLE_ROLES,
    modules=MODULES,
) -> int:
    """
    Create missing permission rows.

    Returns:
        Number of rows created
    """
    result = await db.execute(select(ModulePermission.role, ModulePermission.module))
    existing = set(result.all())

    created = 0
    for role in roles:
        grants = DEFAULT_GRANTS.get(role, {})
        for module in modules:
            if (role, module.key) in existing:
                log.debug(f"Permission {role}/{module.key} already exists, skipping")
                continue
            db.add(ModulePermission(role=role, module=module.key, **grants))
            created += 1

    await db.commit()
    log.info(f"Created {created} permission rows")
    return created


async def main():
    """Main function to seed the permission grid."""
    configure_logging()
    log.info("Starting permission seeding...")

    log.info("Initializing database tables...")
    await init_db()

    async for db in get_db():
        try:
            await seed_module_permissions(db)
            log.info("Permission seeding completed successfully!")
        except Exception as e:
            log.error(f"Error seeding permissions: {e}", exc_info=True)
            await db.rollback()
            raise

        break  # Only use first session


if __name__ == "__main__":
    asyncio.run(main())
