from typing import List, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

Amount = Union[int, str]


class TransferRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    caller: str = Field(validation_alias=AliasChoices("caller", "sender"))
    recipient: str
    amount: Amount


class AllowanceRequest(BaseModel):
    owner: str
    spender: str
    amount: Amount


class TransferFromRequest(BaseModel):
    owner: str
    spender: str
    recipient: str
    amount: Amount


class TransferOtherTokenRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chaincode_name: str = Field(validation_alias=AliasChoices("chaincode_name", "chaincodeName"))
    caller: str
    recipient: str
    amount: Amount


class SupplyChangeRequest(BaseModel):
    address: str
    amount: Amount


class AmountResponse(BaseModel):
    amount: int


class Approval(BaseModel):
    owner: str
    spender: str
    allowance: int


class ApprovalListResponse(BaseModel):
    owner: str
    approvals: List[Approval] = Field(default_factory=list)


class InvokeResponse(BaseModel):
    function: str
    result: str
