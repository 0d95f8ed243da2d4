"""WhatsApp HTTP gateway client."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
import re
import threading
from typing import Any

import requests

from journeybot.data.session import SessionState, SessionTracker

logger = logging.getLogger(__name__)

CHAT_ID_SUFFIX = "@c.us"
QR_PNG_PATH = "qr-code.png"
QR_TEXT_PATH = "qr-code.txt"

GATEWAY_STATUS_MAP = {
    "WORKING": SessionState.READY,
    "SCAN_QR_CODE": SessionState.AWAITING_PAIRING,
    "STOPPED": SessionState.DISCONNECTED,
    "FAILED": SessionState.DISCONNECTED,
}

_STRIP_PATTERN = re.compile(r"[+\s]")


class WhatsAppClientError(Exception):
    """Raised when a gateway request fails or the session cannot send."""


def to_chat_id(phone_number: str) -> str:
    """Turn '+90 555 111 22 33' into the gateway address '905551112233@c.us'."""
    return f"{_STRIP_PATTERN.sub('', phone_number)}{CHAT_ID_SUFFIX}"


class WhatsAppClient:
    """Thin wrapper around a WhatsApp HTTP gateway using requests."""

    def __init__(
        self,
        api_url: str,
        session_name: str = "default",
        api_key: str = "",
        tracker: SessionTracker | None = None,
        status_poll_seconds: float = 5.0,
        qr_png_path: str = QR_PNG_PATH,
        qr_text_path: str = QR_TEXT_PATH,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._session_name = session_name
        self._api_key = api_key
        self._tracker = tracker or SessionTracker()
        self._status_poll_seconds = status_poll_seconds
        self._qr_png_path = Path(qr_png_path)
        self._qr_text_path = Path(qr_text_path)
        self._timeout_seconds = 30
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def tracker(self) -> SessionTracker:
        return self._tracker

    def initialize(self) -> None:
        """Start the gateway session and begin watching its status."""
        logger.info("Starting WhatsApp session '%s' at %s", self._session_name, self._api_url)
        # 422 means the session is already running.
        self._post("/api/sessions/start", {"name": self._session_name}, allowed_status=(422,))
        self.refresh_status()
        self._start_monitor()

    def is_ready(self) -> bool:
        return self._tracker.is_ready()

    def wait_until_ready(self, timeout: float) -> bool:
        return self._tracker.wait_until_ready(timeout)

    def refresh_status(self) -> SessionState:
        """Poll the gateway once and feed the result into the session tracker."""
        payload = self._get(f"/api/sessions/{self._session_name}")
        status = str(payload.get("status", "")).upper()
        state = GATEWAY_STATUS_MAP.get(status, SessionState.UNINITIALIZED)

        if state is SessionState.READY:
            self._tracker.on_ready()
        elif state is SessionState.AWAITING_PAIRING:
            first_prompt = self._tracker.state is not SessionState.AWAITING_PAIRING
            self._tracker.on_pairing_code()
            self._save_pairing_code(announce=first_prompt)
        elif status == "FAILED":
            self._tracker.on_auth_failure(f"gateway status {status}")
        elif state is SessionState.DISCONNECTED:
            self._tracker.on_disconnected(f"gateway status {status}")
        else:
            self._tracker.on_reset()
        return state

    def send_image(self, phone_number: str, data: bytes, filename: str, caption: str = "") -> None:
        """Send a PNG with a caption to a single recipient."""
        if not self.is_ready():
            raise WhatsAppClientError("WhatsApp session is not ready")

        payload = {
            "session": self._session_name,
            "chatId": to_chat_id(phone_number),
            "file": {
                "mimetype": "image/png",
                "filename": filename,
                "data": base64.b64encode(data).decode("ascii"),
            },
            "caption": caption,
        }
        self._post("/api/sendImage", payload)
        logger.info("Image sent to %s", phone_number)

    def destroy(self) -> None:
        """Stop status monitoring and release the gateway session."""
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=self._status_poll_seconds + 1)
        try:
            self._post("/api/sessions/stop", {"name": self._session_name})
        except WhatsAppClientError as exc:
            logger.warning("Could not stop WhatsApp session cleanly: %s", exc)
        self._tracker.on_disconnected("client destroyed")
        logger.info("WhatsApp client closed")

    def _start_monitor(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._monitor_loop, name="whatsapp-status", daemon=True)
        self._thread.start()

    def _monitor_loop(self) -> None:
        while not self._stop_event.wait(timeout=self._status_poll_seconds):
            try:
                self.refresh_status()
            except WhatsAppClientError as exc:
                logger.warning("Session status check failed: %s", exc)
                self._tracker.on_disconnected(str(exc))

    def _save_pairing_code(self, announce: bool) -> None:
        try:
            image = self._get_raw(f"/api/{self._session_name}/auth/qr", {"format": "image"})
            self._qr_png_path.write_bytes(image)
            raw = self._get(f"/api/{self._session_name}/auth/qr", {"format": "raw"})
            self._qr_text_path.write_text(str(raw.get("value", "")), encoding="utf-8")
        except (WhatsAppClientError, OSError) as exc:
            logger.error("Could not save pairing QR code: %s", exc)
            return
        if announce:
            logger.warning(
                "WhatsApp needs pairing: scan %s with the WhatsApp app (raw code in %s)",
                self._qr_png_path,
                self._qr_text_path,
            )

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["X-Api-Key"] = self._api_key
        return headers

    def _check(self, response: requests.Response, allowed_status: tuple[int, ...] = ()) -> None:
        if 200 <= response.status_code < 300 or response.status_code in allowed_status:
            return
        body_text = response.text.strip()
        detail = f"Status {response.status_code}"
        if body_text:
            detail = f"{detail}, Body: {body_text}"
        raise WhatsAppClientError(f"WhatsApp gateway request failed: {detail}")

    def _get_raw(self, path: str, params: dict[str, Any] | None = None) -> bytes:
        url = f"{self._api_url}{path}"
        try:
            response = requests.get(url, headers=self._headers(), params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise WhatsAppClientError(f"WhatsApp gateway request failed: {exc}") from exc
        self._check(response)
        return response.content

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self._api_url}{path}"
        try:
            response = requests.get(url, headers=self._headers(), params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise WhatsAppClientError(f"WhatsApp gateway request failed: {exc}") from exc
        self._check(response)
        try:
            payload = response.json()
        except ValueError as exc:
            raise WhatsAppClientError("WhatsApp gateway response was not valid JSON") from exc
        if not isinstance(payload, dict):
            raise WhatsAppClientError("WhatsApp gateway response was not a JSON object")
        return payload

    def _post(
        self,
        path: str,
        payload: dict[str, Any],
        allowed_status: tuple[int, ...] = (),
    ) -> None:
        url = f"{self._api_url}{path}"
        try:
            response = requests.post(url, headers=self._headers(), json=payload, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise WhatsAppClientError(f"WhatsApp gateway request failed: {exc}") from exc
        self._check(response, allowed_status)


__all__ = ["WhatsAppClient", "WhatsAppClientError", "to_chat_id"]
