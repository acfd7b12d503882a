from flask import current_app

from errors import NotFoundError
from model import Banner, db
from schemas import BannerCreate, BannerUpdate, parse


def create_banner(data):
    command = parse(BannerCreate, data)
    values = command.model_dump()
    values["type"] = command.type.value
    banner = Banner(**values)
    db.session.add(banner)
    db.session.commit()
    current_app.logger.info("Banner %s created", banner.id)
    return banner


def list_banners(active=None):
    query = Banner.query
    if active is not None:
        query = query.filter_by(active=active)
    return query.order_by(Banner.created_at.desc(), Banner.id.desc()).all()


def get_banner(banner_id):
    banner = db.session.get(Banner, banner_id)
    if not banner:
        raise NotFoundError(f"Banner with ID {banner_id} not found")
    return banner


def update_banner(banner_id, data):
    banner = get_banner(banner_id)
    changes = parse(BannerUpdate, data, partial=True).changes()
    if "type" in changes:
        changes["type"] = changes["type"].value
    for key, value in changes.items():
        setattr(banner, key, value)
    db.session.commit()
    current_app.logger.info("Banner %s updated: %s", banner.id, ", ".join(sorted(changes)))
    return banner


def delete_banner(banner_id):
    banner = get_banner(banner_id)
    db.session.delete(banner)
    db.session.commit()
    current_app.logger.info("Banner %s deleted", banner_id)
    return banner
