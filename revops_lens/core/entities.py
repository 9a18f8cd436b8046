"""
Core CRM Entities - Validated Record Schemas

Salesforce-shaped payloads are decoded and validated once at the network
boundary, then handled as typed records everywhere else.

Entities:
- Account: Company being sold to, optionally rolled up under a parent account
- Opportunity: Deal with stage, amount and close date
- CurrentUser: The signed-in user and the app role derived from their profile
- FieldPermission: Field-level security for one field of an object type

Field names keep the Salesforce API names as aliases; unknown attributes
are retained so list views can display any column the backend returns.
"""

from datetime import date
from typing import Any, Optional

from pydantic import AliasChoices, AliasPath, BaseModel, ConfigDict, Field, field_validator


class SalesforceRecord(BaseModel):
    """Base for Salesforce-shaped records."""
    model_config = ConfigDict(
        populate_by_name=True,
        extra="allow",
        frozen=True
    )

    id: str = Field(alias="Id")
    name: str = Field(default="", alias="Name")

    @field_validator("name", mode="before")
    @classmethod
    def _none_name_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Account(SalesforceRecord):
    """
    A company or organization in the CRM.

    Accounts may roll up under a parent account; list views group them
    by `parent_id`.
    """
    industry: Optional[str] = Field(default=None, alias="Industry")
    parent_id: Optional[str] = Field(default=None, alias="ParentId")
    parent_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("parent_name", AliasPath("Parent", "Name"))
    )
    owner_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("owner_name", AliasPath("Owner", "Name"))
    )
    annual_revenue: Optional[float] = Field(default=None, alias="AnnualRevenue")
    employee_count: Optional[int] = Field(default=None, alias="NumberOfEmployees")

    # Prioritisation and enrichment
    priority_score: Optional[float] = Field(default=None, alias="Priority_Score__c")
    priority_tier: Optional[str] = Field(default=None, alias="Priority_Tier__c")
    intent_score: Optional[float] = Field(default=None, alias="SixSense_Intent_Score__c")
    buying_stage: Optional[str] = Field(default=None, alias="SixSense_Buying_Stage__c")
    clay_employee_count: Optional[int] = Field(default=None, alias="Clay_Employee_Count__c")
    clay_employee_growth_pct: Optional[float] = Field(default=None, alias="Clay_Employee_Growth_Pct__c")

    @field_validator("parent_id", mode="before")
    @classmethod
    def _blank_parent_is_none(cls, value: Any) -> Any:
        return None if value == "" else value


class Opportunity(SalesforceRecord):
    """A sales opportunity."""
    account_id: Optional[str] = Field(default=None, alias="AccountId")
    account_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("account_name", AliasPath("Account", "Name"))
    )
    stage_name: str = Field(default="", alias="StageName")
    amount: Optional[float] = Field(default=None, alias="Amount")
    close_date: Optional[date] = Field(default=None, alias="CloseDate")
    probability: Optional[float] = Field(default=None, alias="Probability")
    is_at_risk: bool = Field(default=False, alias="IsAtRisk__c")
    meddpicc_score: Optional[float] = Field(default=None, alias="MEDDPICC_Overall_Score__c")

    @field_validator("close_date", mode="before")
    @classmethod
    def _date_part_only(cls, value: Any) -> Any:
        # Salesforce may send a full timestamp for date fields
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value or None

    @field_validator("is_at_risk", mode="before")
    @classmethod
    def _none_is_false(cls, value: Any) -> Any:
        return False if value is None else value


class CurrentUser(BaseModel):
    """The signed-in user."""
    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    name: str = ""
    email: str = ""
    role: Optional[str] = None


class FieldPermission(BaseModel):
    """Field-level security for one field."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    accessible: bool = True
    updateable: bool = False
    label: str = ""
    type: str = "string"
