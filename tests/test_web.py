"""Tests for the server-rendered screens."""

import io
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from duet.errors import ProviderError
from duet.models.reaction import Reaction
from duet.models.recording import Recording
from duet.models.user_status import UserStatus
from duet.services.presence import PresenceService


def _sign_in(client: TestClient, user: dict) -> None:
    client.cookies.set("duet_auth_token", user["token"])


class TestScreenGating:
    """The passphrase screen comes first, then sign-in, then the main space."""

    def test_fresh_session_sees_passphrase_screen(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert "Our Secret Place" in response.text

    def test_signed_in_without_passphrase_still_locked(self, client: TestClient, me: dict):
        _sign_in(client, me)
        response = client.get("/")
        assert "Our Secret Place" in response.text

    def test_wrong_passphrase(self, client: TestClient):
        response = client.post("/unlock", data={"password": "guess"})
        assert response.status_code == 401
        assert "Wrong password" in response.text
        assert "duet_gate" not in response.cookies

    def test_unlock_then_auth_screen(self, client: TestClient):
        response = client.post("/unlock", data={"password": "open-sesame"}, follow_redirects=False)
        assert response.status_code == 302
        assert "duet_gate" in response.cookies

        response = client.get("/")
        assert "Welcome Back" in response.text

    def test_signup_mode(self, unlocked_client: TestClient):
        response = unlocked_client.get("/?mode=signup")
        assert "Create Account" in response.text

    def test_forged_gate_cookie_rejected(self, client: TestClient):
        client.cookies.set("duet_gate", "forged")
        response = client.get("/")
        assert "Our Secret Place" in response.text


class TestAuthScreen:
    """Tests for the sign-in / sign-up form."""

    def test_email_outside_allow_list(self, unlocked_client: TestClient, db_session: Session):
        response = unlocked_client.post(
            "/auth",
            data={"email": "stranger@example.com", "password": "password123", "mode": "signup"},
        )
        assert response.status_code == 403
        assert "not authorized" in response.text

    def test_signup_signs_in(self, unlocked_client: TestClient):
        response = unlocked_client.post(
            "/auth",
            data={"email": "her@example.com", "password": "password123", "mode": "signup"},
            follow_redirects=False,
        )
        assert response.status_code == 302
        assert "duet_auth_token" in response.cookies

    def test_signin_wrong_password(self, unlocked_client: TestClient, me: dict):
        response = unlocked_client.post("/auth", data={"email": "me@example.com", "password": "wrong"})
        assert response.status_code == 200
        assert "Invalid email or password" in response.text

    def test_auth_requires_passphrase(self, client: TestClient, me: dict):
        response = client.post(
            "/auth",
            data={"email": "me@example.com", "password": "password123"},
            follow_redirects=False,
        )
        assert response.status_code == 302
        assert "duet_auth_token" not in response.cookies


class TestMainScreen:
    """Tests for the main space."""

    def test_main_screen_marks_viewer_online(self, unlocked_client: TestClient, me: dict, db_session: Session):
        _sign_in(unlocked_client, me)
        response = unlocked_client.get("/")
        assert response.status_code == 200
        assert "Welcome back, me" in response.text
        assert "No messages yet" in response.text
        assert db_session.get(UserStatus, me["user_id"]).is_online is True

    def test_logout_marks_viewer_offline(self, unlocked_client: TestClient, me: dict, db_session: Session):
        _sign_in(unlocked_client, me)
        unlocked_client.get("/")
        response = unlocked_client.get("/logout", follow_redirects=False)
        assert response.status_code == 302

        db_session.expire_all()
        assert db_session.get(UserStatus, me["user_id"]).is_online is False

    def test_partner_status_partial(
        self, unlocked_client: TestClient, me: dict, partner: dict, db_session: Session
    ):
        _sign_in(unlocked_client, me)
        response = unlocked_client.get("/partials/partner-status")
        assert "is away" in response.text

        PresenceService().set_status(db_session, partner["user_id"], True)
        response = unlocked_client.get("/partials/partner-status")
        assert "is online" in response.text

    def test_partial_requires_session(self, client: TestClient):
        response = client.get("/partials/partner-status", headers={"HX-Request": "true"})
        assert response.headers["HX-Redirect"] == "/"

    def test_upload_and_timeline(self, unlocked_client: TestClient, me: dict, db_session: Session):
        _sign_in(unlocked_client, me)
        response = unlocked_client.post(
            "/upload",
            files={"file": ("hello.m4a", io.BytesIO(b"\x00" * 64), "audio/mp4")},
            data={"caption": "thinking of you", "mood": "🥰 Sweet"},
            follow_redirects=False,
        )
        assert response.status_code == 302
        assert db_session.query(Recording).count() == 1

        assert db_session.query(Recording).one().mood == "🥰 Sweet"
        assert "thinking of you" in unlocked_client.get("/").text

    def test_upload_non_audio_shows_error(self, unlocked_client: TestClient, me: dict, db_session: Session):
        _sign_in(unlocked_client, me)
        response = unlocked_client.post(
            "/upload",
            files={"file": ("photo.png", io.BytesIO(b"\x89PNG"), "image/png")},
            data={"caption": "", "mood": "😊 Happy"},
        )
        assert response.status_code == 200
        assert "Please upload an audio file" in response.text
        assert db_session.query(Recording).count() == 0

    def test_react_to_partner_recording(
        self, unlocked_client: TestClient, me: dict, partner: dict, db_session: Session
    ):
        recording = Recording(
            user_id=partner["user_id"],
            user_email=partner["email"],
            audio_url="http://testserver/storage/v1/object/public/audio-recordings/recordings/x.mp3",
            mood="😘 Loving",
        )
        db_session.add(recording)
        db_session.commit()

        _sign_in(unlocked_client, me)
        page = unlocked_client.get("/").text
        assert f"/recordings/{recording.id}/react" in page
        before = page.count("😍")

        response = unlocked_client.post(
            f"/recordings/{recording.id}/react",
            data={"emoji": "😍"},
            follow_redirects=False,
        )
        assert response.status_code == 302
        reaction = db_session.query(Reaction).one()
        assert reaction.user_id == me["user_id"]
        assert unlocked_client.get("/").text.count("😍") == before + 1

    def test_no_reaction_buttons_on_own_recording(self, unlocked_client: TestClient, me: dict, db_session: Session):
        recording = Recording(
            user_id=me["user_id"],
            user_email=me["email"],
            audio_url="http://testserver/x.mp3",
            mood="😘 Loving",
        )
        db_session.add(recording)
        db_session.commit()

        _sign_in(unlocked_client, me)
        page = unlocked_client.get("/").text
        assert f"/recordings/{recording.id}/react" not in page

    def test_main_screen_survives_status_write_failure(self, unlocked_client: TestClient, me: dict):
        _sign_in(unlocked_client, me)
        with patch.object(PresenceService, "set_status", side_effect=ProviderError("database is locked")):
            response = unlocked_client.get("/")
        assert response.status_code == 200
        assert "Welcome back, me" in response.text

    def test_partner_status_poll_refreshes_own_status(
        self, unlocked_client: TestClient, me: dict, db_session: Session
    ):
        _sign_in(unlocked_client, me)
        unlocked_client.get("/")
        # a late pagehide beacon from the previous page
        PresenceService().set_status(db_session, me["user_id"], False)

        response = unlocked_client.get("/partials/partner-status")
        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.get(UserStatus, me["user_id"]).is_online is True
