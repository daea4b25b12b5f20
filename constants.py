DATE_FORMAT = "%Y-%m-%d"

# Bucket for records that somehow lack a category
UNCATEGORIZED = "Uncategorized"

# Stored in PRAGMA user_version once the expenses table passes the schema check
SCHEMA_VERSION = 1
EXPENSE_COLUMNS = ("id", "amount", "category", "note", "date")
REQUIRED_COLUMNS = ("amount", "category", "date")

WINDOW_LABELS = {
    "ALL": "All",
    "WEEK": "This Week",
    "MONTH": "This Month",
}

BOT_COMMANDS = {
    "start": {
        "command": "start",
        "description": "Start the bot",
        "help": "Show what the bot can do",
    },
    "add": {
        "command": "add",
        "description": "Add an expense",
        "help": "Record a new expense: /add <amount> <category> [note]",
    },
    "list": {
        "command": "list",
        "description": "List expenses",
        "help": "Show expenses and totals for All, This Week or This Month",
    },
    "edit": {
        "command": "edit",
        "description": "Edit an expense",
        "help": "Select an expense for editing: /edit <id>",
    },
    "save": {
        "command": "save",
        "description": "Save the edited expense",
        "help": "Save new values for the selected expense: /save <amount> <category> [note]",
    },
    "cancel": {
        "command": "cancel",
        "description": "Cancel editing",
        "help": "Drop the pending edit without saving",
    },
    "delete": {
        "command": "delete",
        "description": "Delete an expense",
        "help": "Delete an expense: /delete <id>",
    },
    "chart": {
        "command": "chart",
        "description": "Category chart",
        "help": "Draw spending by category for the selected range",
    },
}

BOT_USAGE_INSTRUCTIONS = "\n".join(
    f"Use /{cmd_info['command']}: {cmd_info['help']}."
    for cmd_info in BOT_COMMANDS.values()
    if cmd_info["command"] != "start"
)
