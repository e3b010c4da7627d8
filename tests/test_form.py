"""End-to-end tests for ProfileForm, driven through a fake container."""

import pytest

from profile_form.config import FormSettings
from profile_form.errors import ProfileFormError
from profile_form.form import ProfileForm
from profile_form.models import EmailEntry, FieldHandlers, ProfileValues, UserSnapshot

from conftest import BASE_VALUES, USER, Container, FakeServer, wait_until


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_initial_can_save_published(self, container: Container, server: FakeServer) -> None:
        async with container.open(server) as form:
            assert form.can_save is True
            assert container.can_save_calls == [True]

    @pytest.mark.asyncio
    async def test_initially_invalid_form(self, server: FakeServer) -> None:
        container = Container(BASE_VALUES.replace(email="not-an-email"))
        async with container.open(server) as form:
            assert form.can_save is False
            assert container.can_save_calls == [False]

    def test_update_outside_session(self, server: FakeServer) -> None:
        form = ProfileForm(BASE_VALUES, FieldHandlers(), USER, FormSettings(), lambda _v: None, server=server)
        with pytest.raises(ProfileFormError, match="async with"):
            form.update(BASE_VALUES.replace(bio="hi"))

    @pytest.mark.asyncio
    async def test_session_cannot_be_nested(self, container: Container, server: FakeServer) -> None:
        form = container.open(server)
        async with form:
            with pytest.raises(ProfileFormError, match="already open"):
                await form.__aenter__()

    @pytest.mark.asyncio
    async def test_closed_session_cannot_be_reopened(self, container: Container, server: FakeServer) -> None:
        form = container.open(server)
        async with form:
            await wait_until(lambda: form.avatar.loaded)
        with pytest.raises(ProfileFormError, match="has ended"):
            async with form:
                pass
        assert server.avatar_calls == 1
        assert container.can_save_calls == [True]

    @pytest.mark.asyncio
    async def test_unchanged_values_are_ignored(self, container: Container, server: FakeServer) -> None:
        async with container.open(server) as form:
            form.update(container.values)
            form.update(container.values.replace())
            assert container.can_save_calls == [True]

    @pytest.mark.asyncio
    async def test_notifications_logged_without_sink(self, server: FakeServer, caplog) -> None:
        server.failing["bob"] = RuntimeError("down")
        values = BASE_VALUES
        form = ProfileForm(values, FieldHandlers(), USER, FormSettings(), lambda _v: None, server=server)
        with caplog.at_level("INFO", logger="profile_form"):
            async with form:
                form.update(values.replace(username="bob"))
                await form.wait_idle()
        assert "Unhandled error notification: down" in caplog.text


class TestScenarios:
    @pytest.mark.asyncio
    async def test_password_mismatch_blocks_saving(self, container: Container, server: FakeServer) -> None:
        async with container.open(server) as form:
            container.handlers.password("secret1")
            container.handlers.confirmation_password("secret2")
            assert form.errors["password"] == "Passwords do not match"
            assert form.can_save is False
            assert container.can_save_calls == [True, False]

            container.handlers.confirmation_password("secret1")
            assert form.can_save is True
            assert container.can_save_calls == [True, False, True]

    @pytest.mark.asyncio
    async def test_edit_email_disables_resend(self, server: FakeServer) -> None:
        user = UserSnapshot(name="Alice", username="alice", emails=(EmailEntry("a@x.com", verified=True),))
        container = Container()
        async with container.open(server, user=user) as form:
            assert form.can_resend_confirmation is True
            container.handlers.email("a@new.com")
            assert form.errors["email"] is None
            assert form.can_resend_confirmation is False
            assert form.resend_confirmation_visible is False
            assert await form.resend_confirmation_email() is False
            assert server.emails_sent == []

    @pytest.mark.asyncio
    async def test_resend_does_not_touch_values(self, container: Container, server: FakeServer) -> None:
        async with container.open(server) as form:
            before = form.values
            assert form.resend_confirmation_visible is True
            assert await form.resend_confirmation_email() is True
            assert form.values is before
            assert [n.type for n in container.notifications] == ["success"]

    @pytest.mark.asyncio
    async def test_unchanged_username_does_not_affect_saving(
        self, container: Container, server: FakeServer
    ) -> None:
        async with container.open(server) as form:
            container.handlers.bio("Hello there")
            await form.wait_idle()
            assert server.username_checks == []
            assert form.errors["username"] is None
            assert form.can_save is True

    @pytest.mark.asyncio
    async def test_status_text_boundary(self, container: Container, server: FakeServer) -> None:
        async with container.open(server) as form:
            container.handlers.status_text("x" * 120)
            assert form.errors["status_text"] is None
            container.handlers.status_text("x" * 121)
            assert form.errors["status_text"] == "Max length is 120"
            assert form.can_save is False

    @pytest.mark.asyncio
    async def test_required_name(self, container: Container, server: FakeServer) -> None:
        async with container.open(server, settings=FormSettings(require_name=True)) as form:
            container.handlers.realname("")
            assert form.errors["realname"] == "Field required"
            container.handlers.realname("Alice")
            assert form.errors["realname"] is None

    @pytest.mark.asyncio
    async def test_errors_clear_in_any_order(self, container: Container) -> None:
        server = FakeServer(taken={"bob"})
        async with container.open(server) as form:
            container.handlers.email("broken")
            container.handlers.username("bob")
            await form.wait_idle()
            assert form.validity.errors.keys() == {"email", "username"}

            container.handlers.email("bob@x.com")
            assert form.can_save is False
            container.handlers.username("alice")
            assert form.can_save is True
            assert container.can_save_calls == [True, False, True]


class TestSet:
    @pytest.mark.asyncio
    async def test_forwards_to_handler(self, container: Container, server: FakeServer) -> None:
        async with container.open(server) as form:
            form.set("realname", "Alicia")
            assert container.values.realname == "Alicia"
            assert form.values.realname == "Alicia"

    @pytest.mark.asyncio
    async def test_avatar_handler(self, container: Container, server: FakeServer) -> None:
        async with container.open(server) as form:
            form.set("avatar", {"service": "upload"})
            assert container.avatars == [{"service": "upload"}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["__init__", "__eq__", "__class__"])
    async def test_dunder_names_rejected(self, container: Container, server: FakeServer, name: str) -> None:
        async with container.open(server) as form:
            with pytest.raises(ProfileFormError, match="Unknown profile field"):
                form.set(name, "x")

    @pytest.mark.asyncio
    async def test_unknown_field(self, container: Container, server: FakeServer) -> None:
        async with container.open(server) as form:
            with pytest.raises(ProfileFormError, match="Unknown profile field"):
                form.set("nickname", "x")


class TestFields:
    @pytest.mark.asyncio
    async def test_view_state(self, container: Container, server: FakeServer) -> None:
        settings = FormSettings(allow_email_change=False, can_change_username=False)
        async with container.open(server, settings=settings) as form:
            container.handlers.password("secret1")
            container.handlers.confirmation_password("secret2")
            fields = form.fields()

        assert fields["email"].disabled is True
        assert fields["username"].disabled is True
        assert fields["realname"].disabled is False
        assert fields["confirmation_password"].visible is True
        assert fields["confirmation_password"].error == "Passwords do not match"
        assert fields["password"].error == "Passwords do not match"
        assert fields["avatar"].value == "alice"

    @pytest.mark.asyncio
    async def test_confirmation_hidden_without_password(self, container: Container, server: FakeServer) -> None:
        async with container.open(server) as form:
            assert form.fields()["confirmation_password"].visible is False


class TestCustomFields:
    @pytest.mark.asyncio
    async def test_custom_fields_pass_through(self, container: Container, server: FakeServer) -> None:
        async with container.open(server) as form:
            container.handlers.custom_fields({"team": "core"})
            assert form.values.custom_fields == {"team": "core"}
            assert form.can_save is True


def test_values_replace_keeps_type() -> None:
    values = ProfileValues(username="alice").replace(bio="hi")
    assert isinstance(values, ProfileValues)
    assert values.bio == "hi"
