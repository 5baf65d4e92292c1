"""Tests for the regex layer."""

from pii_shield.patterns import PATTERNS, scan_regex
from pii_shield.types import EntityType


def _of_type(matches, entity_type):
    return [m for m in matches if m.type is entity_type]


# ── Structured PII ───────────────────────────────────────────────────

def test_email_detection():
    matches = scan_regex("Contact me at alice@example.com please")
    emails = _of_type(matches, EntityType.EMAIL)
    assert len(emails) == 1
    assert emails[0].text == "alice@example.com"
    assert emails[0].confidence == 0.98
    assert emails[0].category == "high"


def test_phone_detection():
    for text in ["Call 555-123-4567", "Call (555) 123-4567", "Call +1 555.123.4567"]:
        phones = _of_type(scan_regex(text), EntityType.PHONE)
        assert len(phones) == 1, text


def test_ssn_detection():
    ssns = _of_type(scan_regex("SSN: 123-45-6789"), EntityType.SSN)
    assert len(ssns) == 1
    assert ssns[0].text == "123-45-6789"


def test_invalid_ssn_dropped():
    assert _of_type(scan_regex("SSN: 666-12-3456"), EntityType.SSN) == []


def test_credit_card_detection():
    ccs = _of_type(scan_regex("Card: 4111-1111-1111-1111"), EntityType.CREDIT_CARD)
    assert len(ccs) == 1


def test_credit_card_failing_luhn_dropped():
    assert _of_type(scan_regex("Card: 4111111111111112"), EntityType.CREDIT_CARD) == []


def test_ip_detection():
    ips = _of_type(scan_regex("Server at 192.168.1.100"), EntityType.IP_ADDRESS)
    assert len(ips) == 1


def test_fixed_prefix_identifiers():
    matches = scan_regex("Badge EMP-12345 and card LC-123456")
    assert _of_type(matches, EntityType.EMPLOYEE_ID)[0].text == "EMP-12345"
    assert _of_type(matches, EntityType.LIBRARY_CARD_ID)[0].text == "LC-123456"


def test_label_prefixed_rule_reports_value_only():
    matches = scan_regex("Routing: 021000021")
    routing = _of_type(matches, EntityType.ROUTING_NUMBER)
    assert len(routing) == 1
    assert routing[0].text == "021000021"
    assert routing[0].start == 9


def test_date_of_birth():
    dobs = _of_type(scan_regex("DOB: 04/12/1985"), EntityType.DATE_OF_BIRTH)
    assert [d.text for d in dobs] == ["04/12/1985"]


def test_address_and_location():
    matches = scan_regex("Ship to 42 Oak Avenue, Springfield, IL")
    assert _of_type(matches, EntityType.ADDRESS)[0].text == "42 Oak Avenue"
    assert "Springfield, IL" in [m.text for m in _of_type(matches, EntityType.LOCATION)]


# ── Names ────────────────────────────────────────────────────────────

def test_name_lead_in_trimmed():
    names = _of_type(scan_regex("Contact John Smith at the desk."), EntityType.NAME)
    assert [n.text for n in names] == ["John Smith"]
    assert names[0].confidence == 0.95


def test_name_rescan_after_rejected_prefix():
    names = _of_type(scan_regex("Please Call John Smith tomorrow."), EntityType.NAME)
    assert [n.text for n in names] == ["John Smith"]


def test_name_with_honorific():
    names = _of_type(scan_regex("Dr. Jane Doe will see you now"), EntityType.NAME)
    assert [n.text for n in names] == ["Dr. Jane Doe"]


def test_name_label_vetoed():
    assert _of_type(scan_regex("Document Type: John Smith"), EntityType.NAME) == []


def test_name_after_date_or_room_number():
    names = _of_type(scan_regex("On June 5 Mary Jones called the office."), EntityType.NAME)
    assert [n.text for n in names] == ["Mary Jones"]
    names = _of_type(scan_regex("Room 204 Sarah Connor checked in."), EntityType.NAME)
    assert [n.text for n in names] == ["Sarah Connor"]


def test_city_is_not_a_name():
    matches = scan_regex("I moved to New York last year")
    assert _of_type(matches, EntityType.NAME) == []
    assert _of_type(matches, EntityType.LOCATION)[0].text == "New York"


# ── Registry behaviour ───────────────────────────────────────────────

def test_cross_type_overlaps_are_left_for_merger():
    # a bare 9-digit run fits both the licence and bank account shapes
    matches = scan_regex("ref 123456789")
    types = {m.type for m in matches if m.text == "123456789"}
    assert {EntityType.DRIVERS_LICENSE, EntityType.BANK_ACCOUNT} <= types


def test_enabled_types_restricts_rules():
    matches = scan_regex("alice@example.com 123-45-6789", {EntityType.SSN})
    assert {m.type for m in matches} == {EntityType.SSN}


def test_span_fidelity():
    text = (
        "Patient Name: Maria Lopez\nDOB: 04/12/1985\nSSN: 123-45-6789\n"
        "Email: maria.lopez@example.com, phone (555) 987-6543, user @mlopez\n"
    )
    for m in scan_regex(text):
        assert text[m.start:m.end] == m.text


def test_every_rule_has_a_base_confidence():
    for rule in PATTERNS:
        assert 0.0 < rule.confidence <= 1.0


def test_empty_text():
    assert scan_regex("") == []


def test_no_false_positive_on_clean_text():
    matches = scan_regex("the weather is nice today, isn't it?")
    assert matches == []
