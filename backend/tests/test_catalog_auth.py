"""Room/menu record management and terminal sign-in."""

from dataclasses import replace

from domain.room import RoomStatus
from domain.user import UserRole

from conftest import make_menu_item, make_room


class TestCatalog:
    def test_seed_defaults_only_fills_empty_store(self, settings, pos):
        pos.catalog.seed_defaults()
        # Store already had R101 and menu items
        assert [r.room_id for r in pos.catalog.list_rooms()] == ["R101"]

        pos.registry.discard("R101")
        for item in pos.catalog.list_menu():
            pos.catalog.delete_menu_item(item.item_id)
        pos.catalog.seed_defaults()
        assert [r.room_id for r in pos.catalog.list_rooms()] == ["R101", "R201"]
        assert pos.repository.get_room("R201").minimum_hours == 1
        assert {m.item_id for m in pos.catalog.list_menu()} == {"M001", "M003"}

    def test_rooms_listed_by_id(self, pos):
        pos.catalog.save_room(make_room("R300"))
        pos.catalog.save_room(make_room("R050"))
        assert [r.room_id for r in pos.catalog.list_rooms()] == ["R050", "R101", "R300"]

    def test_edit_of_free_room_replaces_record(self, pos):
        room = pos.catalog.save_room(replace(pos.catalog.get_room("R101"), hourly_rate=9000))
        assert room.hourly_rate == 9000
        assert pos.repository.get_room("R101").hourly_rate == 9000

    def test_edit_of_occupied_room_keeps_session(self, pos):
        pos.sessions.start_session("R101", 3)
        session = pos.registry.get("R101").session
        room = pos.catalog.save_room(make_room("R101", hourly_rate=12000))
        assert room.status is RoomStatus.OCCUPIED
        assert room.session == session
        assert room.hourly_rate == 12000

    def test_delete_refuses_occupied_room(self, pos):
        pos.sessions.start_session("R101", 3)
        assert pos.catalog.delete_room("R101") is False
        assert pos.catalog.get_room("R101") is not None

    def test_delete_room(self, pos):
        assert pos.catalog.delete_room("R101") is True
        assert pos.catalog.get_room("R101") is None
        assert pos.store.get("room:R101") is None
        assert pos.catalog.delete_room("R101") is False

    def test_toggle_active(self, pos):
        assert pos.catalog.toggle_room_active("R101").is_active is False
        assert pos.catalog.toggle_room_active("R101").is_active is True
        assert pos.catalog.toggle_room_active("NOPE") is None

    def test_menu_crud(self, pos):
        pos.catalog.save_menu_item(make_menu_item("M777", 4500, "Fruit Platter"))
        assert pos.catalog.get_menu_item("M777").price == 4500
        assert pos.catalog.delete_menu_item("M777") is True
        assert pos.catalog.delete_menu_item("M777") is False


class TestAuth:
    def test_login_stores_current_user(self, pos):
        user = pos.auth.login("admin", "admin123")
        assert user.role is UserRole.ADMIN
        assert user.name == "Manager"
        assert pos.auth.current_user() == user
        assert pos.store.get("current-user")["username"] == "admin"

    def test_wrong_password_or_user(self, pos):
        assert pos.auth.login("admin", "staff123") is None
        assert pos.auth.login("ghost", "admin123") is None
        assert pos.auth.current_user() is None

    def test_logout(self, pos):
        pos.auth.login("staff", "staff123")
        pos.auth.logout()
        assert pos.auth.current_user() is None
