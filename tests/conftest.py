"""Shared test fixtures for the elementify test suite."""

from __future__ import annotations

import pytest

from elementify.config import ElementifyConfig
from elementify.converter.ast_normalizer import ASTNormalizer
from elementify.converter.md_to_elements import MarkdownToElementsConverter


@pytest.fixture
def config() -> ElementifyConfig:
    """Default test configuration."""
    return ElementifyConfig()


@pytest.fixture
def converter(config: ElementifyConfig) -> MarkdownToElementsConverter:
    """Markdown-to-elements converter using the default test config."""
    return MarkdownToElementsConverter(config)


@pytest.fixture
def normalizer() -> ASTNormalizer:
    """Normalizer with the default parser options."""
    return ASTNormalizer()
