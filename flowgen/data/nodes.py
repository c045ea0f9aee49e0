"""
Node catalog: n8n node types the generator knows about.

Used by the node browser endpoint, the generation prompt and the mock
provider.
"""
from typing import List, Optional

from ..models import NodeDescriptor

N8N_NODES: List[NodeDescriptor] = [
    # Triggers
    NodeDescriptor(
        type="n8n-nodes-base.webhook",
        name="Webhook",
        category="Trigger",
        description="Receives data when an HTTP request is made to the webhook URL",
        parameters={"httpMethod": "GET", "path": "", "responseMode": "onReceived"},
        common_use=["API integrations", "Form submissions", "External system notifications"],
    ),
    NodeDescriptor(
        type="n8n-nodes-base.cron",
        name="Schedule Trigger",
        category="Trigger",
        description="Triggers the workflow on a schedule",
        parameters={"rule": {"interval": [{"field": "hours", "value": 1}]}},
        common_use=["Regular data sync", "Periodic reports", "Automated maintenance"],
    ),
    NodeDescriptor(
        type="n8n-nodes-base.manualTrigger",
        name="Manual Trigger",
        category="Trigger",
        description="Manually triggers the workflow",
        parameters={},
        common_use=["Testing workflows", "On-demand execution", "Manual processes"],
    ),
    # Email
    NodeDescriptor(
        type="n8n-nodes-base.gmail",
        name="Gmail",
        category="Communication",
        description="Send and receive emails via Gmail",
        parameters={"operation": "send", "subject": "", "message": "", "toEmail": ""},
        credentials=["googleOAuth2Api"],
        common_use=["Email notifications", "Email monitoring", "Automated responses"],
    ),
    NodeDescriptor(
        type="n8n-nodes-base.emailReadImap",
        name="Email Read (IMAP)",
        category="Communication",
        description="Read emails from IMAP server",
        parameters={"format": "simple", "markSeen": True},
        credentials=["imap"],
        common_use=["Email monitoring", "Processing attachments", "Email-based triggers"],
    ),
    # Communication
    NodeDescriptor(
        type="n8n-nodes-base.slack",
        name="Slack",
        category="Communication",
        description="Send messages and interact with Slack",
        parameters={"operation": "postMessage", "channel": "", "text": ""},
        credentials=["slackApi"],
        common_use=["Team notifications", "Alert systems", "Status updates"],
    ),
    NodeDescriptor(
        type="n8n-nodes-base.discord",
        name="Discord",
        category="Communication",
        description="Send messages to Discord channels",
        parameters={"operation": "sendMessage", "channelId": "", "content": ""},
        credentials=["discordApi"],
        common_use=["Community notifications", "Bot interactions", "Gaming alerts"],
    ),
    # Data storage
    NodeDescriptor(
        type="n8n-nodes-base.googleSheets",
        name="Google Sheets",
        category="Data",
        description="Read, write and manipulate Google Sheets",
        parameters={"operation": "append", "documentId": "", "sheetName": "Sheet1"},
        credentials=["googleSheetsOAuth2Api"],
        common_use=["Data logging", "Report generation", "Database operations"],
    ),
    NodeDescriptor(
        type="n8n-nodes-base.airtable",
        name="Airtable",
        category="Data",
        description="Work with Airtable databases",
        parameters={"operation": "list", "application": "", "table": ""},
        credentials=["airtableApi"],
        common_use=["CRM management", "Project tracking", "Content management"],
    ),
    NodeDescriptor(
        type="n8n-nodes-base.notion",
        name="Notion",
        category="Data",
        description="Create and manage Notion pages and databases",
        parameters={"operation": "create", "resource": "page"},
        credentials=["notionApi"],
        common_use=["Documentation", "Knowledge base", "Project management"],
    ),
    # File storage
    NodeDescriptor(
        type="n8n-nodes-base.googleDrive",
        name="Google Drive",
        category="File",
        description="Access and manage Google Drive files",
        parameters={"operation": "upload", "folderId": ""},
        credentials=["googleDriveOAuth2Api"],
        common_use=["File backup", "Document sharing", "File processing"],
    ),
    NodeDescriptor(
        type="n8n-nodes-base.dropbox",
        name="Dropbox",
        category="File",
        description="Upload, download and manage Dropbox files",
        parameters={"operation": "upload", "remotePath": ""},
        credentials=["dropboxApi"],
        common_use=["File synchronization", "Backup solutions", "File sharing"],
    ),
    # Logic and flow control
    NodeDescriptor(
        type="n8n-nodes-base.if",
        name="IF",
        category="Logic",
        description="Route data based on conditions",
        parameters={"conditions": {"string": [{"value1": "", "operation": "equal", "value2": ""}]}},
        common_use=["Conditional logic", "Data filtering", "Decision trees"],
    ),
    NodeDescriptor(
        type="n8n-nodes-base.filter",
        name="Filter",
        category="Logic",
        description="Filter data based on conditions",
        parameters={"conditions": {"string": [{"value1": "", "operation": "equal", "value2": ""}]}},
        common_use=["Data filtering", "Quality control", "Conditional processing"],
    ),
    NodeDescriptor(
        type="n8n-nodes-base.set",
        name="Set",
        category="Logic",
        description="Set values for data transformation",
        parameters={"values": {"string": [{"name": "", "value": ""}]}},
        common_use=["Data transformation", "Variable setting", "Data formatting"],
    ),
    NodeDescriptor(
        type="n8n-nodes-base.code",
        name="Code",
        category="Logic",
        description="Execute custom JavaScript code",
        parameters={"mode": "runOnceForAllItems", "jsCode": "// Your JavaScript code here\nreturn items;"},
        common_use=["Custom logic", "Data processing", "Complex transformations"],
    ),
    # HTTP and APIs
    NodeDescriptor(
        type="n8n-nodes-base.httpRequest",
        name="HTTP Request",
        category="Network",
        description="Make HTTP requests to any URL",
        parameters={"method": "GET", "url": "", "responseFormat": "autodetect"},
        common_use=["API calls", "Web scraping", "External integrations"],
    ),
    # CRM and sales
    NodeDescriptor(
        type="n8n-nodes-base.hubspot",
        name="HubSpot",
        category="Sales",
        description="Manage HubSpot CRM data",
        parameters={"operation": "create", "resource": "contact"},
        credentials=["hubspotApi"],
        common_use=["Lead management", "Sales automation", "Customer tracking"],
    ),
    # Social media
    NodeDescriptor(
        type="n8n-nodes-base.twitter",
        name="Twitter",
        category="Social",
        description="Post tweets and interact with Twitter",
        parameters={"operation": "tweet", "text": ""},
        credentials=["twitterOAuth1Api"],
        common_use=["Social media automation", "Content sharing", "Engagement tracking"],
    ),
]


def list_nodes() -> List[NodeDescriptor]:
    return list(N8N_NODES)


def get_node_by_type(node_type: str) -> Optional[NodeDescriptor]:
    return next((n for n in N8N_NODES if n.type == node_type), None)


def get_nodes_by_category(category: str) -> List[NodeDescriptor]:
    return [n for n in N8N_NODES if n.category == category]


def search_nodes(query: str) -> List[NodeDescriptor]:
    """Case-insensitive substring search over name, description and common uses."""
    q = query.lower()
    return [
        n for n in N8N_NODES
        if q in n.name.lower()
        or q in n.description.lower()
        or any(q in use.lower() for use in n.common_use)
    ]
