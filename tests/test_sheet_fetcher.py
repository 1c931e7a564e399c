from __future__ import annotations

from typing import Any

import pytest

from remote_panel.connectors.base import ConnectorRequestError
from remote_panel.connectors.sheet_fetcher import FetchError, SheetFetcher
from remote_panel.domain.sheet_source import SheetDocumentDescriptor, SourceConfig
from remote_panel.domain.sync import SyncErrorKind


class FakeReader:
    def __init__(
        self,
        *,
        values: list[list[Any]] | None = None,
        error: Exception | None = None,
        enabled: bool = True,
        title: str = "Remoto 8",
    ) -> None:
        self._values = values or []
        self._error = error
        self._enabled = enabled
        self._title = title
        self.range_calls: list[tuple[str, str]] = []

    @property
    def enabled(self) -> bool:
        return self._enabled

    def get_range(self, document_id: str, range_spec: str) -> list[list[Any]]:
        self.range_calls.append((document_id, range_spec))
        if self._error is not None:
            raise self._error
        return self._values

    def get_metadata(self, document_id: str) -> SheetDocumentDescriptor:
        if self._error is not None:
            raise self._error
        return SheetDocumentDescriptor(document_id=document_id, title=self._title)


def _config(tab_name: str | None = None) -> SourceConfig:
    return SourceConfig(
        source_name="ACHS_Remoto_8",
        document_id="doc-8",
        sponsor_name="ACHS",
        label_name="Remoto 8",
        tab_name=tab_name,
    )


class TestFetch:
    def test_returns_padded_block(self) -> None:
        reader = FakeReader(values=[["Sponsor", "Ejecutivo", "Estado"], ["ACHS", "Ana"]])

        block = SheetFetcher(client=reader).fetch("doc-8")

        assert block.headers == ("Sponsor", "Ejecutivo", "Estado")
        assert block.rows == (("ACHS", "Ana", ""),)
        assert reader.range_calls == [("doc-8", "A:T")]

    def test_explicit_range_overrides_default(self) -> None:
        reader = FakeReader(values=[["Ejecutivo"], ["Ana"]])

        SheetFetcher(client=reader, range_spec="A:T").fetch("doc-8", "A:Z")

        assert reader.range_calls == [("doc-8", "A:Z")]

    def test_disabled_client_fails_fast(self) -> None:
        reader = FakeReader(enabled=False)

        with pytest.raises(FetchError) as exc_info:
            SheetFetcher(client=reader).fetch("doc-8")

        assert exc_info.value.kind == SyncErrorKind.CONNECTION_ERROR
        assert reader.range_calls == []

    def test_remote_failure_is_connection_error(self) -> None:
        reader = FakeReader(error=ConnectorRequestError("boom", status_code=500))

        with pytest.raises(FetchError) as exc_info:
            SheetFetcher(client=reader).fetch("doc-8")

        assert exc_info.value.kind == SyncErrorKind.CONNECTION_ERROR
        assert "boom" in exc_info.value.message

    @pytest.mark.parametrize(
        "values",
        [
            [],
            [["", "  "], ["ACHS", "Ana"]],
            [["Sponsor", "Ejecutivo"]],
        ],
        ids=["no-rows", "blank-header", "header-only"],
    )
    def test_missing_data(self, values: list[list[Any]]) -> None:
        with pytest.raises(FetchError) as exc_info:
            SheetFetcher(client=FakeReader(values=values)).fetch("doc-8")

        assert exc_info.value.kind == SyncErrorKind.MISSING_DATA


class TestBuildRange:
    def test_without_tab(self) -> None:
        assert SheetFetcher(client=FakeReader()).build_range(_config()) == "A:T"

    def test_with_tab_quotes_name(self) -> None:
        fetcher = SheetFetcher(client=FakeReader())

        assert fetcher.build_range(_config("Llamadas")) == "'Llamadas'!A:T"
        assert fetcher.build_range(_config("Ana's calls"), "B:C") == "'Ana''s calls'!B:C"


class TestCheckConnection:
    def test_success_reports_title(self) -> None:
        status = SheetFetcher(client=FakeReader(title="Remoto 8")).check_connection("doc-8")

        assert status.is_connected is True
        assert status.message == "Connection successful. Test sheet: Remoto 8"
        assert status.elapsed_seconds >= 0

    def test_failure_never_raises(self) -> None:
        status = SheetFetcher(client=FakeReader(error=RuntimeError("denied"))).check_connection("doc-8")

        assert status.is_connected is False
        assert status.message == "Connection error: denied"

    def test_disabled_client(self) -> None:
        status = SheetFetcher(client=FakeReader(enabled=False)).check_connection("doc-8")

        assert status.is_connected is False
        assert "not initialized" in status.message
