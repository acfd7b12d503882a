import pytest

from conftest import headers_for
from errors import NotFoundError, ValidationError
from services import banners, gallery


@pytest.fixture
def banner_data():
    return {
        "title": "Summer in Issyk-Kul",
        "description": "Direct flights from Osh every Saturday",
        "imageUrl": "https://cdn.oshair.kg/banners/summer.jpg",
        "duration": 5,
        "type": "promotion",
        "link": "https://oshair.kg/summer",
    }


@pytest.fixture
def gallery_data():
    return {
        "title": "Airbus A320",
        "description": "Our newest aircraft on the Osh route",
        "imageUrl": "https://cdn.oshair.kg/gallery/a320.jpg",
        "category": "aircraft",
    }


class TestBanners:
    def test_create(self, app, banner_data):
        banner = banners.create_banner(banner_data)
        assert banner.type == "promotion"
        assert banner.active is True

    def test_image_url_must_be_http(self, app, banner_data):
        banner_data["imageUrl"] = "notaurl"
        with pytest.raises(ValidationError) as exc:
            banners.create_banner(banner_data)
        assert exc.value.field == "imageUrl"

    def test_blank_link_is_dropped(self, app, banner_data):
        banner_data["link"] = "  "
        assert banners.create_banner(banner_data).link is None

    def test_bad_link(self, app, banner_data):
        banner_data["link"] = "ftp://oshair.kg"
        with pytest.raises(ValidationError):
            banners.create_banner(banner_data)

    @pytest.mark.parametrize("field,value", [("title", "A"), ("description", "Hi"), ("duration", 0), ("type", "popup")])
    def test_field_rules(self, app, banner_data, field, value):
        banner_data[field] = value
        with pytest.raises(ValidationError) as exc:
            banners.create_banner(banner_data)
        assert exc.value.field == field

    def test_partial_update_and_clearing_link(self, app, banner_data):
        banner = banners.create_banner(banner_data)
        updated = banners.update_banner(banner.id, {"title": "Winter in Osh", "link": None})
        assert updated.title == "Winter in Osh"
        assert updated.link is None
        assert updated.description == banner_data["description"]

    def test_title_cannot_be_blanked(self, app, banner_data):
        banner = banners.create_banner(banner_data)
        with pytest.raises(ValidationError):
            banners.update_banner(banner.id, {"title": ""})

    def test_active_filter(self, app, banner_data):
        shown = banners.create_banner(banner_data)
        banner_data["active"] = False
        hidden = banners.create_banner(banner_data)
        assert [b.id for b in banners.list_banners(active=True)] == [shown.id]
        assert [b.id for b in banners.list_banners()] == [hidden.id, shown.id]

    def test_delete(self, app, banner_data):
        banner = banners.create_banner(banner_data)
        banners.delete_banner(banner.id)
        with pytest.raises(NotFoundError):
            banners.get_banner(banner.id)

    def test_routes(self, client, admin, traveller, banner_data):
        assert client.post("/api/v1/banners", json=banner_data, headers=headers_for(traveller)).status_code == 403
        assert client.post("/api/v1/banners", json=banner_data, headers=headers_for(admin)).status_code == 201
        response = client.get("/api/v1/banners?active=true")
        assert [b["title"] for b in response.get_json()] == ["Summer in Issyk-Kul"]


class TestGallery:
    def test_create_and_filter_by_category(self, app, gallery_data):
        plane = gallery.create_gallery_item(gallery_data)
        gallery_data.update(title="Sulaiman-Too", category="destination")
        gallery.create_gallery_item(gallery_data)
        assert [i.id for i in gallery.list_gallery_items(category="aircraft")] == [plane.id]
        assert len(gallery.list_gallery_items()) == 2

    def test_unknown_category_filter(self, app):
        with pytest.raises(ValidationError) as exc:
            gallery.list_gallery_items(category="food")
        assert exc.value.code == "invalid_category"

    def test_unknown_category_on_create(self, app, gallery_data):
        gallery_data["category"] = "food"
        with pytest.raises(ValidationError) as exc:
            gallery.create_gallery_item(gallery_data)
        assert exc.value.field == "category"

    def test_update(self, app, gallery_data):
        item = gallery.create_gallery_item(gallery_data)
        updated = gallery.update_gallery_item(item.id, {"category": "service", "active": False})
        assert updated.category == "service"
        assert updated.active is False

    def test_routes(self, client, admin, gallery_data):
        response = client.post("/api/v1/gallery", json=gallery_data, headers=headers_for(admin))
        assert response.status_code == 201
        item_id = response.get_json()["id"]
        assert client.get(f"/api/v1/gallery/{item_id}").get_json()["imageUrl"] == gallery_data["imageUrl"]
        assert client.get("/api/v1/gallery?category=food").status_code == 400
