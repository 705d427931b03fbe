"""
Unit tests for platform models.

Run with: pytest tests/unit/test_models.py -v
"""

import pytest

from hawkop.api.models import (
    ApplicationScanResult,
    Number,
    OrganizationMember,
    OrganizationMembersResponse,
    PaginationOptions,
    ScanAlertsResponse,
    Text,
    UserResponse,
    normalize_number_or_text,
)


class TestNumberOrText:
    """Test suite for loosely typed numeric fields"""

    @pytest.mark.parametrize("raw,expected", [
        (42, 42.0),
        (12.5, 12.5),
        ("42", 42.0),
        ("3.5", 3.5),
    ])
    def test_numeric_values(self, raw, expected):
        """Test numbers and numeric strings become Number"""
        value = normalize_number_or_text(raw)

        assert isinstance(value, Number)
        assert value.value == expected

    @pytest.mark.parametrize("raw", ["n/a", "", "nan", "inf"])
    def test_text_values(self, raw):
        """Test non-numeric and non-finite strings stay text"""
        value = normalize_number_or_text(raw)

        assert isinstance(value, Text)
        assert value.value == raw

    def test_bool_is_text(self):
        """Test booleans are not treated as numbers"""
        assert normalize_number_or_text(True) == Text(value="true")

    def test_field_on_scan_result(self):
        """Test decoding both shapes on a scan result"""
        numeric = ApplicationScanResult.model_validate({"scanDuration": "120"})
        textual = ApplicationScanResult.model_validate({"scanDuration": "pending"})

        assert numeric.scan_duration == Number(value=120.0)
        assert textual.scan_duration == Text(value="pending")

    def test_serializes_to_wire_shape(self):
        """Test whole numbers serialize as ints, text as strings"""
        result = ApplicationScanResult.model_validate({"scanDuration": "120", "urlCount": "many"})

        data = result.to_dict()

        assert data["scanDuration"] == 120
        assert data["urlCount"] == "many"


class TestEnvelopes:
    """Test suite for response envelopes"""

    def test_user_memberships(self):
        """Test nested organization memberships decode"""
        payload = {
            "user": {
                "stackhawkId": "u1",
                "external": {
                    "email": "a@example.com",
                    "fullName": "Ada",
                    "organizations": [
                        {"organization": {"id": "o1", "name": "One"}, "role": "OWNER"},
                    ],
                },
            }
        }

        user = UserResponse.model_validate(payload).user

        assert user.stackhawk_id == "u1"
        assert user.external.organizations[0].organization.id == "o1"
        assert user.external.organizations[0].role == "OWNER"

    def test_null_lists_become_empty(self):
        """Test a null payload list decodes as empty"""
        envelope = OrganizationMembersResponse.model_validate({"users": None})

        assert envelope.users == []

    def test_unknown_fields_ignored(self):
        """Test extra fields do not break decoding"""
        envelope = ScanAlertsResponse.model_validate({
            "applicationScanResults": [{"applicationAlerts": [], "somethingNew": 1}],
            "extra": True,
        })

        assert envelope.application_scan_results[0].application_alerts == []

    def test_numeric_timestamps_coerced(self):
        """Test epoch numbers are kept as strings"""
        member = OrganizationMember.model_validate({"createdTimestamp": 1700000000000})

        assert member.created_timestamp == "1700000000000"

    def test_primary_role(self):
        """Test the role comes from the first organization"""
        member = OrganizationMember.model_validate({
            "external": {"organizations": [{"role": "ADMIN"}, {"role": "MEMBER"}]},
        })

        assert member.primary_role == "ADMIN"
        assert OrganizationMember().primary_role == ""


class TestPaginationOptions:
    """Test suite for PaginationOptions"""

    @pytest.mark.parametrize("requested,expected", [
        (0, 1000),
        (-5, 1000),
        (50, 50),
        (1000, 1000),
        (5000, 1000),
    ])
    def test_page_size_clamped(self, requested, expected):
        """Test page size is clamped to the platform maximum"""
        assert PaginationOptions(page_size=requested).page_size == expected

    def test_params_omit_empty_fields(self):
        """Test only set fields are sent"""
        params = PaginationOptions(page_size=10, sort_dir="asc").to_params()

        assert params == {"pageSize": "10", "sortDir": "asc"}

    def test_all_params(self):
        """Test every field maps to its query name"""
        params = PaginationOptions(
            page_token="tok", page="2", sort_field="status", sort_dir="asc"
        ).to_params()

        assert params == {
            "pageSize": "1000",
            "pageToken": "tok",
            "page": "2",
            "sortField": "status",
            "sortDir": "asc",
        }


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
