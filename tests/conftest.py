"""Pytest configuration and shared fixtures for repository test runs."""

from __future__ import annotations

import stat
import sys
from pathlib import Path
from typing import Callable
from xml.sax.saxutils import escape, quoteattr

import pytest

DumpPage = tuple[str, str]

_EXPORT_NAMESPACE = "http://www.mediawiki.org/xml/export-0.10/"


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


def render_page_xml(title: str, body: str, page_id: int = 1) -> str:
    """Render one export-schema page element for test dumps."""
    redirect = ""
    if body.startswith("#REDIRECT"):
        target = body.split("[[", 1)[-1].split("]]", 1)[0]
        redirect = f"    <redirect title={quoteattr(target)} />\n"
    return (
        "  <page>\n"
        f"    <title>{escape(title)}</title>\n"
        "    <ns>0</ns>\n"
        f"    <id>{page_id}</id>\n"
        f"{redirect}"
        "    <revision>\n"
        f"      <id>{page_id}00</id>\n"
        f"      <parentid>{page_id}99</parentid>\n"
        "      <timestamp>2020-05-01T00:00:00Z</timestamp>\n"
        "      <contributor>\n"
        "        <username>Editor</username>\n"
        "        <id>7</id>\n"
        "      </contributor>\n"
        "      <comment>seed</comment>\n"
        "      <model>wikitext</model>\n"
        "      <format>text/x-wiki</format>\n"
        f'      <text bytes="{len(body.encode("utf-8"))}" xml:space="preserve">'
        f"{escape(body)}</text>\n"
        f"      <sha1>sha{page_id}</sha1>\n"
        "    </revision>\n"
        "  </page>\n"
    )


@pytest.fixture
def dump_factory(tmp_path: Path) -> Callable[[list[DumpPage]], Path]:
    """Return a builder that writes ``build/dump.xml`` from (title, body) pairs."""

    def build(pages: list[DumpPage]) -> Path:
        dump_dir = tmp_path / "build"
        dump_dir.mkdir(exist_ok=True)
        dump_path = dump_dir / "dump.xml"
        page_xml = "".join(
            render_page_xml(title, body, page_id)
            for page_id, (title, body) in enumerate(pages, 1)
        )
        dump_path.write_text(
            f'<mediawiki xmlns="{_EXPORT_NAMESPACE}" version="0.10">\n'
            "  <siteinfo><sitename>Test</sitename></siteinfo>\n"
            f"{page_xml}"
            "</mediawiki>\n",
            encoding="utf-8",
        )
        return dump_path

    return build


@pytest.fixture
def script_factory(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a builder for executable ``/bin/sh`` transformer scripts."""

    def build(name: str, body: str) -> Path:
        scripts_dir = tmp_path / "scripts"
        scripts_dir.mkdir(exist_ok=True)
        script_path = scripts_dir / name
        script_path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        script_path.chmod(script_path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script_path

    return build
