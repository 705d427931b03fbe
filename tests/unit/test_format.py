"""
Unit tests for output formatting.

Run with: pytest tests/unit/test_format.py -v
"""

import json
from datetime import datetime

import pytest
from rich.console import Console

from hawkop.api.models import (
    AlertStats,
    AppApplication,
    ApplicationScanResult,
    Number,
    Organization,
    ScanAlert,
    Text,
)
from hawkop.format import (
    alerts_table,
    applications_table,
    format_number_or_text,
    format_timestamp,
    or_na,
    organizations_table,
    scan_overview_table,
    scan_stats_table,
    scans_table,
    to_json,
)


def render(table) -> str:
    console = Console(width=200, record=True, color_system=None)
    console.print(table)
    return console.export_text()


class TestHelpers:
    """Test suite for formatting helpers"""

    def test_or_na(self):
        assert or_na("") == "N/A"
        assert or_na(None) == "N/A"
        assert or_na("pro") == "pro"

    def test_format_timestamp_local_time(self):
        """Test milliseconds are rendered in local time"""
        millis = 1700000000000
        expected = datetime.fromtimestamp(millis / 1000).strftime("%Y-%m-%d %H:%M")

        assert format_timestamp(str(millis), "%Y-%m-%d %H:%M") == expected

    @pytest.mark.parametrize("value", [None, "", "yesterday"])
    def test_format_timestamp_invalid(self, value):
        """Test missing or non-numeric timestamps render empty"""
        assert format_timestamp(value) == ""

    @pytest.mark.parametrize("value", ["99999999999999999999", "-99999999999999999999"])
    def test_format_timestamp_out_of_range(self, value):
        """Test timestamps outside the platform clock range render empty"""
        assert format_timestamp(value) == ""

    def test_format_number_or_text(self):
        assert format_number_or_text(Number(value=125.6), suffix="s") == "126s"
        assert format_number_or_text(Text(value="pending"), suffix="s") == "pending"
        assert format_number_or_text(None) == ""

    def test_to_json_list_uses_wire_names(self):
        """Test JSON output keeps platform field names"""
        output = to_json([AppApplication(application_id="a1", name="Billing")])

        assert json.loads(output) == [{"applicationId": "a1", "name": "Billing"}]

    def test_to_json_empty_list(self):
        assert json.loads(to_json([])) == []


class TestViews:
    """Test suite for resource tables"""

    def test_organizations_table(self):
        """Test missing plan renders as N/A"""
        text = render(organizations_table([Organization(id="o1", name="Acme")]))

        assert "ID" in text and "PLAN" in text
        assert "Acme" in text
        assert "N/A" in text

    def test_applications_table(self):
        text = render(applications_table([
            AppApplication(application_id="a1", name="Billing", env="prod", application_status="ACTIVE"),
        ]))

        assert "Billing" in text
        assert "ACTIVE" in text

    def test_scans_table(self):
        """Test duration and alert totals are shown"""
        result = ApplicationScanResult.model_validate({
            "scan": {"id": "s1", "applicationName": "Billing", "status": "COMPLETED"},
            "scanDuration": "90",
            "alertStats": {"high": 1, "total": 4},
        })

        text = render(scans_table([result]))

        assert "s1" in text
        assert "90s" in text
        assert "4" in text

    def test_scan_overview_table(self):
        result = ApplicationScanResult.model_validate({
            "scan": {"id": "s1", "applicationName": "Billing", "status": "COMPLETED"},
            "urlCount": 12,
            "policyName": "Default",
        })

        text = render(scan_overview_table(result))

        assert "URLs Scanned" in text
        assert "12" in text
        assert "Default" in text

    def test_scan_stats_table(self):
        """Test stats view and its absence"""
        with_stats = ApplicationScanResult(alert_stats=AlertStats(high=2, medium=1, total=3))

        text = render(scan_stats_table(with_stats))

        assert "High" in text and "Total" in text
        assert scan_stats_table(ApplicationScanResult()) is None

    def test_alerts_table(self):
        text = render(alerts_table([ScanAlert(plugin_id="10020", name="Missing Header", severity="Low", uri_count=3)]))

        assert "10020" in text
        assert "Missing Header" in text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
