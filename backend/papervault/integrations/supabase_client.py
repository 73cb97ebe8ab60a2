"""Supabase clients (anon and service role) held per app in ``app.extensions``."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import Flask, current_app
from loguru import logger
from supabase import Client, create_client


@dataclass
class SupabaseClients:
    anon: Optional[Client] = None
    service: Optional[Client] = None


class SupabaseExt:
    def __init__(self) -> None:
        self.clients = SupabaseClients()

    def init_app(self, app: Flask) -> None:
        url = app.config.get("SUPABASE_URL")
        keys = {
            "anon": app.config.get("SUPABASE_ANON_KEY"),
            "service": app.config.get("SUPABASE_SERVICE_ROLE_KEY"),
        }
        if url:
            for name, key in keys.items():
                if key:
                    setattr(self.clients, name, create_client(url, key))
            if not any(keys.values()):
                logger.warning("SUPABASE_URL is set but no key is configured; Supabase stays disabled")
        app.extensions["supabase"] = self

    @property
    def anon(self) -> Optional[Client]:
        return self.clients.anon

    @property
    def service(self) -> Optional[Client]:
        return self.clients.service

    @property
    def client(self) -> Optional[Client]:
        """Service-role client when configured, else the anon client."""
        return self.clients.service or self.clients.anon


def current_supabase() -> SupabaseExt:
    return current_app.extensions["supabase"]
