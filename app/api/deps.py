"""
Shared route dependencies
=========================
- get_access_token    — bearer credential from the Authorization header (401 if absent)
- get_rng             — fresh RandomSource per request
- get_github_service  — GitHubService bound to the caller's token, closed after the request
- get_stress_agent    — StressAgent sharing the request's RandomSource, closed after the request

Tests swap collaborators through app.dependency_overrides.
"""
from typing import AsyncIterator, Optional

from fastapi import Depends, Header

from app.agents.stress_agent import StressAgent
from app.core.errors import AuthError
from app.services.github_service import GitHubService
from app.utils.random_source import RandomSource


def get_access_token(authorization: Optional[str] = Header(default=None)) -> str:
    if not authorization:
        raise AuthError()
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError()
    return token.strip()


def get_rng() -> RandomSource:
    return RandomSource()


async def get_github_service(
    access_token: str = Depends(get_access_token),
) -> AsyncIterator[GitHubService]:
    github = GitHubService(access_token)
    try:
        yield github
    finally:
        await github.close()


async def get_stress_agent(rng: RandomSource = Depends(get_rng)) -> AsyncIterator[StressAgent]:
    agent = StressAgent(rng=rng)
    try:
        yield agent
    finally:
        await agent.close()
