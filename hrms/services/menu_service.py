"""Menu service: navigation entries filtered by the caller's permissions."""

from typing import Iterable, List, Dict, Any, Optional

from sqlalchemy.orm import Session

from hrms.core.exceptions import ResourceNotFoundError, ResourceConflictError
from hrms.core.permission_catalog import DEFAULT_MENU_ITEMS
from hrms.models.menu_item import MenuItem
from hrms.models.permission import Permission

# Columns a PATCH may set back to NULL
CLEARABLE_FIELDS = {"path", "icon", "section", "parent_id", "permission_id"}


def _visible(item: MenuItem, permissions: Iterable[str]) -> bool:
    return item.permission is None or item.permission.name in permissions


class MenuService:
    """CRUD and visibility rules for menu items."""

    @staticmethod
    def to_dict(item: MenuItem, children: Optional[List[MenuItem]] = None) -> Dict[str, Any]:
        if children is None:
            children = item.children
        return {
            "id": item.id,
            "name": item.name,
            "path": item.path,
            "icon": item.icon,
            "section": item.section,
            "sort_order": item.sort_order,
            "is_active": item.is_active,
            "parent_id": item.parent_id,
            "permission_name": item.permission_name,
            "children": [MenuService.to_dict(child, []) for child in children],
        }

    @staticmethod
    def list_menu_items(db: Session) -> List[Dict[str, Any]]:
        """Root entries with their children."""
        roots = (
            db.query(MenuItem)
            .filter(MenuItem.parent_id.is_(None))
            .order_by(MenuItem.section.asc(), MenuItem.sort_order.asc())
            .all()
        )
        return [MenuService.to_dict(item) for item in roots]

    @staticmethod
    def menu_items_for_permissions(db: Session, permissions: Iterable[str]) -> List[Dict[str, Any]]:
        """Active menus the holder of ``permissions`` may see.

        An entry without a permission is public. A root stays only when it
        has a path of its own or at least one visible child.
        """
        permissions = set(permissions)
        roots = (
            db.query(MenuItem)
            .filter(MenuItem.parent_id.is_(None), MenuItem.is_active.is_(True))
            .order_by(MenuItem.section.asc(), MenuItem.sort_order.asc())
            .all()
        )
        menus = []
        for root in roots:
            if not _visible(root, permissions):
                continue
            children = [
                child for child in root.children
                if child.is_active and _visible(child, permissions)
            ]
            if root.path or children:
                menus.append(MenuService.to_dict(root, children))
        return menus

    @staticmethod
    def get_menu_item(db: Session, menu_id: int) -> MenuItem:
        item = db.query(MenuItem).filter(MenuItem.id == menu_id).first()
        if not item:
            raise ResourceNotFoundError(f"Menu item {menu_id} not found")
        return item

    @staticmethod
    def create_menu_item(db: Session, data: Dict[str, Any]) -> MenuItem:
        item = MenuItem(**data)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def update_menu_item(db: Session, menu_id: int, data: Dict[str, Any]) -> MenuItem:
        item = MenuService.get_menu_item(db, menu_id)
        if data.get("parent_id") == menu_id:
            raise ResourceConflictError("A menu item cannot be its own parent")
        for key, value in data.items():
            if value is None and key not in CLEARABLE_FIELDS:
                continue
            setattr(item, key, value)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def delete_menu_item(db: Session, menu_id: int) -> None:
        """Delete an entry; its children are moved to the root level."""
        item = MenuService.get_menu_item(db, menu_id)
        db.query(MenuItem).filter(MenuItem.parent_id == menu_id).update(
            {"parent_id": None}, synchronize_session="fetch",
        )
        db.expire(item, ["children"])
        db.delete(item)
        db.commit()

    @staticmethod
    def reorder_menu_items(db: Session, items: List[Dict[str, Any]]) -> None:
        """Set sort orders; an entry moves to another parent only when ``parent_id`` is given."""
        for entry in items:
            item = MenuService.get_menu_item(db, entry["id"])
            item.sort_order = entry["sort_order"]
            if "parent_id" in entry:
                item.parent_id = entry["parent_id"]
        db.commit()

    @staticmethod
    def seed_defaults(db: Session) -> int:
        """Replace all menu items with the default navigation tree."""
        db.query(MenuItem).update({"parent_id": None}, synchronize_session=False)
        db.query(MenuItem).delete(synchronize_session=False)
        db.flush()
        permission_ids = dict(db.query(Permission.name, Permission.id).all())

        count = 0
        for definition in DEFAULT_MENU_ITEMS:
            root = MenuItem(
                name=definition["name"],
                path=definition["path"],
                icon=definition["icon"],
                section=definition["section"],
                sort_order=definition["sort_order"],
                permission_id=permission_ids.get(definition["permission"]),
            )
            db.add(root)
            db.flush()
            count += 1
            for child in definition.get("children", []):
                db.add(MenuItem(
                    name=child["name"],
                    path=child["path"],
                    icon=child["icon"],
                    section=definition["section"],
                    sort_order=child["sort_order"],
                    parent_id=root.id,
                    permission_id=permission_ids.get(child["permission"]),
                ))
                count += 1
        db.commit()
        return count


menu_service = MenuService()
