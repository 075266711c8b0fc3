"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting domain services
and infrastructure adapters into routes, plus the builders that turn
Settings into concrete adapters at startup.
"""

import httpx
from fastapi import Depends, Request

from src.adapters.anti_spam import (
    AllowAllAntiSpamChecker,
    BlocklistAntiSpamChecker,
    HttpAntiSpamChecker,
)
from src.config.settings import Settings, get_settings
from src.domain.policies import EmailDomainPolicy
from src.domain.ports import AntiSpamChecker, UserRepository
from src.domain.registration import UserRegistrationService


def build_anti_spam_checker(
    settings: Settings, client: httpx.AsyncClient | None = None
) -> AntiSpamChecker:
    """
    Create the anti-spam adapter selected by settings.anti_spam_backend.

    Args:
        settings: Application settings
        client: Shared AsyncClient for the HTTP backend (ignored otherwise)
    """
    if settings.anti_spam_backend == "http":
        return HttpAntiSpamChecker(
            settings.anti_spam_url,
            timeout_seconds=settings.anti_spam_timeout_seconds,
            attempts=settings.anti_spam_retries,
            fail_open=settings.anti_spam_fail_open,
            client=client,
        )
    if settings.anti_spam_backend == "blocklist":
        return BlocklistAntiSpamChecker(
            banned_emails=settings.blocked_emails,
            banned_domains=settings.blocked_domains,
        )
    return AllowAllAntiSpamChecker()


def get_repository(request: Request) -> UserRepository:
    """
    Get user repository from app state.

    The repository is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.repository


def get_anti_spam_checker(request: Request) -> AntiSpamChecker:
    """Get anti-spam adapter from app state."""
    return request.app.state.anti_spam


def get_domain_policy(settings: Settings = Depends(get_settings)) -> EmailDomainPolicy:
    return EmailDomainPolicy.from_domains(settings.allowed_email_domains)


def get_registration_service(
    repository: UserRepository = Depends(get_repository),
    anti_spam: AntiSpamChecker = Depends(get_anti_spam_checker),
    domain_policy: EmailDomainPolicy = Depends(get_domain_policy),
) -> UserRegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository, anti-spam adapter and domain policy.
    """
    return UserRegistrationService(
        repository=repository,
        anti_spam=anti_spam,
        domain_policy=domain_policy,
    )
