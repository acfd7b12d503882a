from flask import current_app

from errors import NotFoundError, ValidationError
from model import GalleryCategory, GalleryItem, db
from schemas import GalleryCreate, GalleryUpdate, parse


def create_gallery_item(data):
    command = parse(GalleryCreate, data)
    values = command.model_dump()
    values["category"] = command.category.value
    item = GalleryItem(**values)
    db.session.add(item)
    db.session.commit()
    current_app.logger.info("Gallery item %s created in %s", item.id, item.category)
    return item


def list_gallery_items(category=None, active=None):
    query = GalleryItem.query
    if category:
        valid = [c.value for c in GalleryCategory]
        if category not in valid:
            raise ValidationError(
                f"Invalid category. Must be one of: {', '.join(valid)}", code="invalid_category", field="category"
            )
        query = query.filter_by(category=category)
    if active is not None:
        query = query.filter_by(active=active)
    return query.order_by(GalleryItem.created_at.desc(), GalleryItem.id.desc()).all()


def get_gallery_item(item_id):
    item = db.session.get(GalleryItem, item_id)
    if not item:
        raise NotFoundError(f"Gallery item with ID {item_id} not found")
    return item


def update_gallery_item(item_id, data):
    item = get_gallery_item(item_id)
    changes = parse(GalleryUpdate, data, partial=True).changes()
    if "category" in changes:
        changes["category"] = changes["category"].value
    for key, value in changes.items():
        setattr(item, key, value)
    db.session.commit()
    current_app.logger.info("Gallery item %s updated: %s", item.id, ", ".join(sorted(changes)))
    return item


def delete_gallery_item(item_id):
    item = get_gallery_item(item_id)
    db.session.delete(item)
    db.session.commit()
    current_app.logger.info("Gallery item %s deleted", item_id)
    return item
