"""
Opportunities List

Same flow as the accounts page without grouping: fetch by query key,
then narrow locally by search box, stage and at-risk flag.
"""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Union

from ..client.api import ApiError
from ..context import AppContext
from ..core.entities import Opportunity
from ..filters.criteria import FieldDefinition, FieldType
from ..filters.state import ListFilterController
from ..filters.url import UrlQuery
from ..grouping.working_set import ALL_STAGES, OpportunitySort, narrow_opportunities

log = logging.getLogger(__name__)

OBJECT_TYPE = "Opportunity"
RESOURCE_TYPE = "opportunities"

OPPORTUNITY_FILTER_FIELDS = (
    FieldDefinition("Name", "Opportunity Name", FieldType.STRING),
    FieldDefinition("StageName", "Stage", FieldType.PICKLIST,
                    ("Discovery", "Value Confirmation", "Negotiation", "Closed Won", "Closed Lost")),
    FieldDefinition("Amount", "Amount", FieldType.NUMBER),
    FieldDefinition("Probability", "Probability", FieldType.NUMBER),
    FieldDefinition("CloseDate", "Close Date", FieldType.DATE),
)


@dataclass
class OpportunityListResult:
    """What the opportunities page renders."""
    query_key: tuple = ()
    opportunities: list = field(default_factory=list)
    error: Optional[str] = None

    @property
    def total_amount(self) -> float:
        return sum(o.amount or 0 for o in self.opportunities)


class OpportunityListView:
    """State and data of one opportunities list page."""

    def __init__(
        self,
        context: AppContext,
        url: Union[str, Mapping[str, str], UrlQuery, None] = None,
        include_closed: bool = False
    ):
        self.context = context
        lists = context.settings.lists
        self.filters = ListFilterController.initialize(
            RESOURCE_TYPE,
            url,
            role_default_scope=context.default_scope(),
            default_sort_field=lists.opportunity_default_sort,
            default_sort_direction=lists.default_sort_direction,
            fields=OPPORTUNITY_FILTER_FIELDS
        )
        self.include_closed = include_closed

        self.search_term = ""
        self.stage = ALL_STAGES
        self.at_risk_only = False
        self.sort_by = OpportunitySort.CLOSE_DATE

    @property
    def query_key(self) -> tuple:
        # includeClosed narrows the result set
        return self.filters.query_key + (self.include_closed,)

    def fetch_opportunities(self, refresh: bool = False) -> list[Opportunity]:
        params = self.filters.query_params
        include_closed = self.include_closed
        return self.context.cache.fetch(
            self.query_key,
            lambda: self.context.api.list_opportunities(params, include_closed=include_closed),
            force=refresh
        )

    def load(self, refresh: bool = False) -> OpportunityListResult:
        key = self.query_key
        try:
            opportunities = self.fetch_opportunities(refresh=refresh)
        except ApiError as e:
            log.warning("Loading opportunities for %r failed: %s", key, e)
            return OpportunityListResult(query_key=key, error=str(e))

        return OpportunityListResult(
            query_key=key,
            opportunities=narrow_opportunities(
                opportunities,
                search=self.search_term,
                stage=self.stage,
                at_risk_only=self.at_risk_only,
                sort_by=self.sort_by
            )
        )
