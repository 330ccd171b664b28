from datetime import timedelta

import pytest

from src.app.services.qr_code_issuer import QrCodeIssuer
from src.domain.errors import ErrorCode

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def test_generated_code_matches_format(qr_issuer):
    code = qr_issuer.generate_code()

    assert code.startswith("SG_")
    assert len(code) == len("SG_") + 12
    assert qr_issuer.is_valid_format(code)


def test_generated_codes_are_distinct(qr_issuer):
    codes = {qr_issuer.generate_code() for _ in range(200)}
    assert len(codes) == 200


@pytest.mark.parametrize(
    "code",
    [
        None,
        "",
        "SG_ABCDEF12345",  # too short
        "SG_ABCDEF1234567",  # too long
        "SG_abcdef123456",  # lower case
        "XX_ABCDEF123456",  # wrong prefix
        "SGABCDEF123456",  # missing separator
        "SG_ABCDEF12345!",
    ],
)
def test_rejects_malformed_codes(qr_issuer, code):
    assert qr_issuer.is_valid_format(code) is False


def test_default_configuration_uses_32_characters():
    issuer = QrCodeIssuer()
    code = issuer.generate_code()

    assert len(code) == 35
    assert issuer.is_valid_format(code)


def test_expiry_defaults_to_issue_time_plus_window(qr_issuer, now):
    assert qr_issuer.compute_expiry(None, now) == now + timedelta(hours=24)


def test_expiry_follows_expected_end(qr_issuer, now):
    expected_end = now + timedelta(hours=3)
    assert qr_issuer.compute_expiry(expected_end, now) == expected_end


@pytest.mark.asyncio
async def test_issue_binds_code_to_visit(qr_issuer, mock_uow, visit, now):
    """Issued code, issue time and expiry are written onto the visit"""
    visit.qr_code = None
    visit.expected_end = None

    result = await qr_issuer.issue(mock_uow, visit, now)

    assert result.is_ok()
    assert visit.qr_code == result.value.code
    assert visit.qr_issued_at == now
    assert visit.qr_expires_at == now + timedelta(hours=24)
    mock_uow.visits.qr_code_exists.assert_awaited_once()


@pytest.mark.asyncio
async def test_issue_retries_on_collision(qr_issuer, mock_uow, visit, now):
    mock_uow.visits.qr_code_exists.side_effect = [True, True, False]

    result = await qr_issuer.issue(mock_uow, visit, now)

    assert result.is_ok()
    assert mock_uow.visits.qr_code_exists.await_count == 3


@pytest.mark.asyncio
async def test_issue_exhausted_after_max_retries(qr_issuer, mock_uow, visit, now):
    mock_uow.visits.qr_code_exists.return_value = True

    result = await qr_issuer.issue(mock_uow, visit, now)

    assert result.is_err()
    assert result.error.code == ErrorCode.ISSUANCE_EXHAUSTED
    assert result.error.details == {"attempts": 3}
    assert mock_uow.visits.qr_code_exists.await_count == 3


def test_render_png(qr_issuer):
    image = qr_issuer.render_png("SG_ABCDEF123456")
    assert image.startswith(PNG_SIGNATURE)


def test_render_data_url(qr_issuer):
    url = qr_issuer.render_data_url("SG_ABCDEF123456")
    assert url.startswith("data:image/png;base64,")
