"""Tests for the EDINET client, document models and filing source."""

import io
import zipfile
from datetime import date

import pytest
import requests

from src.edinet_downloader.edinet_client import EdinetClient, EdinetError
from src.edinet_downloader.filing_source import EdinetDocumentPayload, EdinetFilingSource
from src.edinet_downloader.models import DocumentEntry
from src.edinet_downloader.utils import iter_dates, parse_period_from_description


DOCUMENT_LIST = {
    "metadata": {"status": "200", "message": "OK"},
    "results": [
        {
            "docID": "S100AAAA",
            "edinetCode": "E00001",
            "filerName": "テスト株式会社",
            "formCode": "030000",
            "docTypeCode": "120",
            "periodStart": "2023-04-01",
            "periodEnd": "2024-03-31",
            "docDescription": "有価証券報告書－第10期(2023/04/01－2024/03/31)",
        },
        {
            "docID": "S100BBBB",
            "edinetCode": "E00002",
            "filerName": "訂正株式会社",
            "formCode": "030001",
            "docTypeCode": "130",
            "periodStart": None,
            "periodEnd": None,
            "docDescription": "訂正有価証券報告書－第5期(2022/01/01－2022/12/31)",
        },
        {
            "docID": "S100CCCC",
            "edinetCode": "E00003",
            "filerName": "四半期株式会社",
            "formCode": "043000",
            "docTypeCode": "140",
        },
    ],
}


class FakeResponse:
    def __init__(self, payload=None, status_code=200, content=b"", content_type="application/json"):
        self._payload = payload
        self.status_code = status_code
        self.content = content
        self.headers = {"Content-Type": content_type}

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def iter_content(self, chunk_size=8192):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start:start + chunk_size]


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.headers = {}
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        return self.response


def _archive_bytes():
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("XBRL/PublicDoc/jpcrp030000-asr_E00001.xbrl", b"<instance/>")
    return buffer.getvalue()


def test_parse_period_from_description():
    assert parse_period_from_description("有価証券報告書－第10期(2023/04/01－2024/03/31)") == (
        "2023-04-01",
        "2024-03-31",
    )
    assert parse_period_from_description("有価証券報告書") == ("", "")
    assert parse_period_from_description(None) == ("", "")


def test_iter_dates_is_inclusive():
    assert list(iter_dates(date(2024, 6, 20), date(2024, 6, 21))) == [
        date(2024, 6, 20),
        date(2024, 6, 21),
    ]
    with pytest.raises(ValueError):
        list(iter_dates(date(2024, 6, 21), date(2024, 6, 20)))


def test_document_entry_filtering_and_period_fallback():
    entries = [DocumentEntry.from_api(item) for item in DOCUMENT_LIST["results"]]

    assert [e.is_securities_report for e in entries] == [True, True, False]
    assert entries[0].fiscal_period == ("2023-04-01", "2024-03-31")
    assert entries[1].fiscal_period == ("2022-01-01", "2022-12-31")


def test_list_securities_reports_sends_key_and_filters():
    session = FakeSession(FakeResponse(DOCUMENT_LIST))
    client = EdinetClient("secret", timeout_seconds=42, session=session)

    entries = client.list_securities_reports("2024-06-21")

    assert [e.doc_id for e in entries] == ["S100AAAA", "S100BBBB"]
    url, kwargs = session.calls[0]
    assert url == "https://api.edinet-fsa.go.jp/api/v2/documents.json"
    assert kwargs["params"] == {"date": "2024-06-21", "type": 2, "Subscription-Key": "secret"}
    assert kwargs["timeout"] == 42


def test_api_error_status_raises():
    payload = {"metadata": {"status": "401", "message": "Access denied"}}
    client = EdinetClient("bad", session=FakeSession(FakeResponse(payload)))

    with pytest.raises(EdinetError, match="401"):
        client.list_documents(date(2024, 6, 21))


def test_http_error_is_wrapped_without_leaking_key():
    client = EdinetClient("secret", session=FakeSession(FakeResponse({}, status_code=500)))

    with pytest.raises(EdinetError) as excinfo:
        client.list_documents("2024-06-21")
    assert "secret" not in str(excinfo.value)


def test_client_requires_api_key():
    with pytest.raises(EdinetError):
        EdinetClient("")


def test_download_document_writes_archive(tmp_path):
    response = FakeResponse(content=_archive_bytes(), content_type="application/octet-stream")
    session = FakeSession(response)
    client = EdinetClient("secret", session=session)

    path = client.download_document("S100AAAA", tmp_path / "doc.zip")

    assert zipfile.is_zipfile(path)
    url, kwargs = session.calls[0]
    assert url.endswith("/documents/S100AAAA")
    assert kwargs["params"]["type"] == 1


def test_download_document_rejects_json_error_body(tmp_path):
    response = FakeResponse({"metadata": {"status": "404"}}, content_type="application/json; charset=utf-8")
    client = EdinetClient("secret", session=FakeSession(response))

    with pytest.raises(EdinetError):
        client.download_document("S100AAAA", tmp_path / "doc.zip")


def test_filing_source_builds_filings_for_each_day(monkeypatch, tmp_path):
    client = EdinetClient("secret", session=FakeSession(FakeResponse(DOCUMENT_LIST)))
    requested = []

    def fake_list(target_date):
        requested.append(target_date)
        if target_date == date(2024, 6, 21):
            return [DocumentEntry.from_api(item) for item in DOCUMENT_LIST["results"][:2]]
        return []

    monkeypatch.setattr(client, "list_securities_reports", fake_list)
    source = EdinetFilingSource(client, tmp_path)

    filings = source.list_filings("2024-06-20", "2024-06-21")

    assert requested == [date(2024, 6, 20), date(2024, 6, 21)]
    assert [(f.filer_code, f.doc_id) for f in filings] == [
        ("E00001", "S100AAAA"),
        ("E00002", "S100BBBB"),
    ]
    assert (filings[1].period_start, filings[1].period_end) == ("2022-01-01", "2022-12-31")
    assert isinstance(filings[0].payload, EdinetDocumentPayload)


def test_document_payload_downloads_lazily_and_cleans_up(monkeypatch, tmp_path):
    client = EdinetClient("secret", session=FakeSession(FakeResponse({})))
    downloads = []

    def fake_download(doc_id, local_path):
        downloads.append(doc_id)
        local_path.write_bytes(_archive_bytes())
        return local_path

    monkeypatch.setattr(client, "download_document", fake_download)
    payload = EdinetDocumentPayload(client, "S100AAAA", tmp_path)

    assert downloads == []
    assert payload.read_bytes() == b"<instance/>"
    assert downloads == ["S100AAAA"]

    archive = payload.zip_path
    payload.cleanup()
    assert not archive.exists()
    assert list(tmp_path.iterdir()) == []
