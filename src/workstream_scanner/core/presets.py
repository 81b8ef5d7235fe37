"""Built-in scan presets: patterns, rules, schemas, labels and report text.

These are the defaults behind each scan; a config file can override any of them.
"""

# Literal substrings that indicate mock data
MOCK_PATTERNS = [
    "mock",
    "fake",
    "dummy",
    "placeholder",
    "sample data",
    "test data",
    "staticData",
    "mockData",
    "MOCK_",
]

# Test code and vendored code are expected to use mocks
MOCK_EXCLUDE_PATH_MARKERS = ["test", "__tests__", "spec", "node_modules"]

# Lines that already go through the real data layer
MOCK_EXCLUDE_CONTEXT_MARKERS = ["database"]

# (path substring, module) in priority order
MODULE_RULES = [
    ("/auth/", "auth"),
    ("/authentication/", "auth"),
    ("/assessment/", "assessment"),
    ("/item/", "item-banking"),
    ("/item-banking/", "item-banking"),
    ("/psychometric/", "psychometric"),
    ("/results/", "results"),
    ("/admin/", "admin"),
    ("/analytics/", "analytics"),
    ("/ui/", "ui"),
    ("/components/", "ui"),
]

SCHEMAS = [
    "auth",
    "public",
    "assessment",
    "item",
    "results",
    "admin",
    "organization",
]

# {schema} is replaced with the escaped schema name; groups capture schema and table
SCHEMA_TABLE_PATTERN = r"""from\(\s*['"]({schema})\.([^'")]+)['"]"""

REPOSITORY_MODULES = [
    "auth",
    "assessment",
    "item",
    "results",
    "psychometric",
    "admin",
    "analytics",
]

REPOSITORY_ACCESS_PATTERN = r"from|supabase"

WORKSTREAM_LABELS = [
    {
        "name": "workstream-data-access",
        "color": "0366d6",
        "description": "Standardize database access patterns",
    },
    {
        "name": "workstream-mock-replacement",
        "color": "6f42c1",
        "description": "Replace mock data with real Supabase DB integration",
    },
    {
        "name": "workstream-repository-pattern",
        "color": "1d76db",
        "description": "Implement repository pattern across modules",
    },
    {
        "name": "workstream-auth",
        "color": "5319e7",
        "description": "Authentication and permission system improvements",
    },
    {
        "name": "workstream-navigation",
        "color": "d4c5f9",
        "description": "Consolidate navigation and role-based access",
    },
    {
        "name": "workstream-type-centralization",
        "color": "f9c513",
        "description": "Centralize TypeScript types and improve type safety",
    },
    {
        "name": "workstream-ui",
        "color": "fbca04",
        "description": "UI component improvements and standardization",
    },
]

PRIORITY_LABELS = [
    {"name": "priority:high", "color": "b60205", "description": "High priority task"},
    {"name": "priority:medium", "color": "ffcc00", "description": "Medium priority task"},
    {"name": "priority:low", "color": "c5def5", "description": "Low priority task"},
]


MOCK_REPORT = {
    "title": "Workstream Mock Replacement Report",
    "overview": (
        "This report identifies mock data usage in the codebase that needs to be "
        "replaced with real Supabase database integration. This is part of the "
        "`workstream-mock-replacement` initiative, which aims to enhance the "
        "application's reliability by using real data."
    ),
    "findings_heading": "Mock Data Usage",
    "group_intro": "Files with mock data:",
    "empty_message": "No mock data usage found.",
    "closing_sections": [
        {
            "heading": "Implementation Steps",
            "body": (
                "1. Analyze mock data usage across all modules\n"
                "2. Define a replacement strategy for each module\n"
                "3. Move remaining fixtures into dedicated test data utilities\n"
                "4. Replace mock sources with real queries, module by module\n"
                "\n"
                "Each replacement should also add:\n"
                "- Loading state components\n"
                "- SWR integration for data fetching\n"
                "- Error handling patterns\n"
                "- Database connectivity monitoring"
            ),
        },
    ],
}

DATA_ACCESS_REPORT = {
    "title": "Workstream Data Access Report",
    "overview": (
        "This report identifies direct schema-prefixed table access patterns in "
        "the codebase that need to be refactored to use the new function-based "
        "approach."
    ),
    "findings_heading": "Schema-Prefixed Table Access",
    "group_intro": "Files with direct access:",
    "empty_message": "No direct schema-prefixed table access found.",
    "closing_sections": [
        {
            "heading": "Implementation Recommendation",
            "body": (
                "1. Create the `safeTableAccess` utility\n"
                "2. Generate module-specific database access functions\n"
                "3. Create the `DatabaseStatus` component\n"
                "4. Replace each direct access listed above with the module function"
            ),
        },
    ],
}

REPOSITORY_REPORT = {
    "title": "Workstream Repository Pattern Report",
    "overview": (
        "This report outlines the implementation of the repository pattern across "
        "modules. This is part of the `workstream-repository-pattern` initiative, "
        "which aims to improve code organization, testability, and maintainability."
    ),
    "findings_heading": "Current Status",
    "group_intro": "",
    "empty_message": "No direct database access found in any module.",
    "closing_sections": [
        {
            "heading": "Implementation",
            "body": (
                "Each module gets:\n"
                "- Repository interfaces defining data access contracts\n"
                "- Repository implementations providing data access logic\n"
                "- Repository factories for consistent instance access\n"
                "\n"
                "The repository pattern provides:\n"
                "- Separation of concerns between data access and business logic\n"
                "- Improved testability with easy mocking\n"
                "- Consistent error handling and response formatting\n"
                "- Centralized data access logic\n"
                "- Better maintainability and code organization"
            ),
        },
        {
            "heading": "Next Steps",
            "body": (
                "1. Start with the module that has the most direct database access\n"
                "2. Replace direct database access with repository calls\n"
                "3. Add unit tests for each repository\n"
                "4. Update existing tests to use mock repositories\n"
                "5. Proceed to the next module"
            ),
        },
    ],
}
