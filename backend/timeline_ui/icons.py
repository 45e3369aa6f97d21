"""Icons assigned to child object types when they are added to a timeline."""

OBJECT_ICON_MAP = {
    "Task": "standard:task",
    "Event": "standard:event",
    "Contact": "standard:contact",
    "Account": "standard:account",
    "Case": "standard:case",
    "Lead": "standard:lead",
    "Opportunity": "standard:opportunity",
    "OpportunityLineItem": "standard:opportunity_product",
    "OpportunityTeamMember": "standard:team_member",
    "Contract": "standard:contract",
    "Order": "standard:order",
    "OrderItem": "standard:order_item",
    "Quote": "standard:quotes",
    "QuoteLineItem": "standard:quote_line_item",
    "Note": "standard:note",
    "Attachment": "standard:file",
    "ContentDocument": "standard:file",
    "EmailMessage": "standard:email",
    "CampaignMember": "standard:campaign_members",
    "AccountContactRole": "standard:contact",
    "OpportunityContactRole": "standard:contact",
    "CaseComment": "standard:case_comment",
    "FeedItem": "standard:feed",
    "User": "standard:user",
    "Product2": "standard:product",
    "Pricebook2": "standard:pricebook",
    "Asset": "standard:asset_object",
    "Solution": "standard:solution",
}

CUSTOM_OBJECT_ICON = "standard:custom"
DEFAULT_OBJECT_ICON = "standard:record"


def icon_for_object(object_api_name: str) -> str:
    """Standard icon for known types, a generic one for custom (__c) types."""
    if object_api_name in OBJECT_ICON_MAP:
        return OBJECT_ICON_MAP[object_api_name]
    if object_api_name.endswith("__c"):
        return CUSTOM_OBJECT_ICON
    return DEFAULT_OBJECT_ICON
