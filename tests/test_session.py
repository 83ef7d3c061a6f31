from datetime import timedelta

from storefront_checkout.core.session import SessionManager


class TestSessionManager:
    def test_each_session_gets_its_own_cart(self, rice):
        manager = SessionManager()
        first = manager.create_session(user_id="a")
        second = manager.create_session(user_id="b")

        first.cart.add_item(rice)

        assert first.cart.item_count == 1
        assert second.cart.is_empty

    def test_factory_builds_checkout_per_session(self, orchestrator):
        manager = SessionManager(orchestrator_factory=lambda session: orchestrator)
        session = manager.create_session()
        assert session.checkout is orchestrator

    def test_only_user_role_can_shop(self):
        manager = SessionManager()
        assert manager.create_session(role="user").can_shop
        assert not manager.create_session(role="admin").can_shop

    def test_cleanup_removes_idle_sessions(self):
        manager = SessionManager()
        stale = manager.create_session()
        fresh = manager.create_session()
        stale.updated_at -= timedelta(hours=30)

        assert manager.cleanup_old_sessions(max_age_hours=24) == 1
        assert manager.get_session(stale.session_id) is None
        assert manager.get_session(fresh.session_id) is fresh

    def test_delete_session(self):
        manager = SessionManager()
        session = manager.create_session()
        assert manager.delete_session(session.session_id)
        assert not manager.delete_session(session.session_id)
