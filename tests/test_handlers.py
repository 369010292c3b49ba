import pytest

from app.modules.fabric.handlers import log_chaincode_error, log_chaincode_event
from app.modules.fabric.models import ChaincodeEvent
from app.modules.token.models import (
    ApprovalEvent,
    TransferEvent,
    decode_token_event,
    parse_approval_list,
)


def _event(name, payload: bytes) -> ChaincodeEvent:
    return ChaincodeEvent(chaincode_id="erc20-transfer", event_name=name, payload=payload, tx_id="tx-1", block_number=3)


def test_decode_transfer_event():
    event = _event("transferEvent", b'{"sender":"alice","recipient":"bob","amount":25}')
    assert decode_token_event(event) == TransferEvent(sender="alice", recipient="bob", amount=25)


def test_decode_approval_event():
    event = _event("approvalEvent", b'{"owner":"alice","spender":"carol","allowance":10}')
    assert decode_token_event(event) == ApprovalEvent(owner="alice", spender="carol", allowance=10)


def test_decode_unknown_event_is_none():
    assert decode_token_event(_event("mintEvent", b"{}")) is None


@pytest.mark.parametrize("payload", [b"not json", b"[1, 2]", b'{"sender":"alice"}'])
def test_decode_malformed_payload(payload):
    with pytest.raises(ValueError):
        decode_token_event(_event("transferEvent", payload))


def test_parse_approval_list():
    raw = '[{"owner":"alice","spender":"bob","allowance":3},{"owner":"alice","spender":"carol","allowance":0}]'
    approvals = parse_approval_list(raw)
    assert [a.spender for a in approvals] == ["bob", "carol"]
    assert parse_approval_list("") == []
    assert parse_approval_list("null") == []


def test_log_chaincode_event(caplog):
    caplog.set_level("INFO")
    log_chaincode_event(_event("transferEvent", b'{"sender":"alice","recipient":"bob","amount":25}'))

    messages = [record.getMessage() for record in caplog.records]
    assert any(
        "chaincode event emitted: erc20-transfer  transferEvent" in message and '"amount":25' in message
        for message in messages
    )
    assert any("TransferEvent(sender='alice'" in message for message in messages)


def test_log_chaincode_event_with_undecodable_payload(caplog):
    caplog.set_level("INFO")
    log_chaincode_event(_event("transferEvent", b"\xff\xfe"))

    assert any(record.levelname == "WARNING" for record in caplog.records)


def test_log_chaincode_error(caplog):
    caplog.set_level("ERROR")
    log_chaincode_error(ConnectionError("stream reset"))
    assert any("chaincode event error: stream reset" in record.getMessage() for record in caplog.records)
