"""
Permission catalog and role definitions.

Static data used by the resolver (legacy role mapping), the role service
(predefined roles, available permissions) and the seed scripts.
"""

from hrms.models.user import LegacyRole

# Wildcard held by administrators. It is NOT expanded by the route guard;
# callers wanting a blanket bypass must check for it explicitly.
SYSTEM_ADMIN = "system.admin"

SYSTEM_PERMISSIONS = {
    # Users
    "USERS_VIEW": "users.view",
    "USERS_CREATE": "users.create",
    "USERS_CREATE_SUPER_ADMIN": "users.create.super_admin",
    "USERS_CREATE_ADMIN": "users.create.admin",
    "USERS_CREATE_HR": "users.create.hr",
    "USERS_CREATE_MANAGER": "users.create.manager",
    "USERS_CREATE_EMPLOYEE": "users.create.employee",
    "USERS_EDIT": "users.edit",
    "USERS_DELETE": "users.delete",
    "USERS_MANAGE_ROLES": "users.manage_roles",
    "USERS_VIEW_SALARY": "users.view_salary",
    "USERS_EDIT_SALARY": "users.edit_salary",
    # Departments
    "DEPARTMENTS_VIEW": "departments.view",
    "DEPARTMENTS_CREATE": "departments.create",
    "DEPARTMENTS_EDIT": "departments.edit",
    "DEPARTMENTS_DELETE": "departments.delete",
    "DEPARTMENTS_MANAGE": "departments.manage",
    # Positions
    "POSITIONS_VIEW": "positions.view",
    "POSITIONS_CREATE": "positions.create",
    "POSITIONS_EDIT": "positions.edit",
    "POSITIONS_DELETE": "positions.delete",
    # Leaves
    "LEAVES_VIEW_OWN": "leaves.view_own",
    "LEAVES_VIEW_TEAM": "leaves.view_team",
    "LEAVES_VIEW_ALL": "leaves.view_all",
    "LEAVES_CREATE": "leaves.create",
    "LEAVES_APPROVE": "leaves.approve",
    "LEAVES_REJECT": "leaves.reject",
    "LEAVES_CANCEL": "leaves.cancel",
    # Finance
    "PAYROLL_VIEW": "payroll.view",
    "PAYROLL_MANAGE": "payroll.manage",
    "EXPENSES_VIEW": "expenses.view",
    "EXPENSES_APPROVE": "expenses.approve",
    "BUDGET_VIEW": "budget.view",
    "BUDGET_MANAGE": "budget.manage",
    # Reports and analytics
    "REPORTS_VIEW": "reports.view",
    "REPORTS_CREATE": "reports.create",
    "ANALYTICS_VIEW": "analytics.view",
    "ANALYTICS_ADVANCED": "analytics.advanced",
    # System administration
    "SYSTEM_ADMIN": SYSTEM_ADMIN,
    "SYSTEM_SETTINGS": "system.settings",
    "SYSTEM_BACKUP": "system.backup",
    "SYSTEM_LOGS": "system.logs",
    "ROLES_VIEW": "roles.view",
    "ROLES_MANAGE": "roles.manage",
    "PERMISSIONS_MANAGE": "permissions.manage",
    # Own profile
    "PROFILE_VIEW_OWN": "profile.view_own",
    "PROFILE_EDIT_OWN": "profile.edit_own",
}

P = SYSTEM_PERMISSIONS

PERMISSION_CATEGORIES = {
    "users": "User management",
    "departments": "Department management",
    "positions": "Position management",
    "leaves": "Leave management",
    "payroll": "Payroll",
    "expenses": "Expenses",
    "budget": "Budget",
    "reports": "Reports",
    "analytics": "Analytics",
    "system": "System administration",
    "roles": "Role management",
    "permissions": "Permission management",
    "profile": "Personal profile",
}

# Applies when a user carries no legacy role at all
DEFAULT_PERMISSIONS = [P["USERS_VIEW"]]

# Both admin levels also hold the names the role and audit routes are gated on
LEGACY_ROLE_PERMISSIONS = {
    LegacyRole.SUPER_ADMIN: [
        SYSTEM_ADMIN,
        P["USERS_VIEW"], P["USERS_CREATE"],
        P["USERS_CREATE_SUPER_ADMIN"], P["USERS_CREATE_ADMIN"], P["USERS_CREATE_HR"],
        P["USERS_CREATE_MANAGER"], P["USERS_CREATE_EMPLOYEE"],
        P["USERS_EDIT"], P["USERS_DELETE"], P["USERS_MANAGE_ROLES"],
        P["REPORTS_VIEW"], P["REPORTS_CREATE"], P["ANALYTICS_VIEW"],
        P["SYSTEM_SETTINGS"], P["SYSTEM_LOGS"],
        P["ROLES_VIEW"], P["ROLES_MANAGE"], P["PERMISSIONS_MANAGE"],
    ],
    LegacyRole.ADMIN: [
        SYSTEM_ADMIN,
        P["USERS_VIEW"], P["USERS_CREATE"],
        P["USERS_CREATE_ADMIN"], P["USERS_CREATE_MANAGER"], P["USERS_CREATE_EMPLOYEE"],
        P["USERS_EDIT"], P["USERS_DELETE"], P["USERS_MANAGE_ROLES"],
        P["REPORTS_VIEW"], P["REPORTS_CREATE"], P["ANALYTICS_VIEW"],
        P["DEPARTMENTS_VIEW"], P["DEPARTMENTS_MANAGE"],
        P["POSITIONS_VIEW"], P["POSITIONS_CREATE"], P["POSITIONS_EDIT"], P["POSITIONS_DELETE"],
        P["ROLES_VIEW"],
    ],
    LegacyRole.RH: [
        P["USERS_VIEW"], P["USERS_CREATE"],
        P["USERS_CREATE_MANAGER"], P["USERS_CREATE_EMPLOYEE"],
        P["USERS_EDIT"], P["USERS_VIEW_SALARY"], P["USERS_EDIT_SALARY"],
        P["DEPARTMENTS_VIEW"], P["DEPARTMENTS_MANAGE"],
        P["POSITIONS_VIEW"], P["POSITIONS_CREATE"], P["POSITIONS_EDIT"],
        P["LEAVES_VIEW_ALL"], P["LEAVES_APPROVE"], P["LEAVES_REJECT"],
        P["PAYROLL_VIEW"], P["PAYROLL_MANAGE"],
        P["REPORTS_VIEW"], P["REPORTS_CREATE"],
    ],
    LegacyRole.MANAGER: [
        P["USERS_VIEW"], P["USERS_EDIT"],
        P["REPORTS_VIEW"], P["REPORTS_CREATE"],
        P["DEPARTMENTS_VIEW"], P["POSITIONS_VIEW"],
        P["LEAVES_VIEW_TEAM"], P["LEAVES_APPROVE"], P["LEAVES_REJECT"],
        P["PROFILE_VIEW_OWN"], P["PROFILE_EDIT_OWN"],
    ],
    LegacyRole.EMPLOYEE: [
        P["USERS_VIEW"],
        P["LEAVES_VIEW_OWN"], P["LEAVES_CREATE"],
        P["PROFILE_VIEW_OWN"], P["PROFILE_EDIT_OWN"],
    ],
}

_EVERYONE = [P["PROFILE_VIEW_OWN"], P["PROFILE_EDIT_OWN"]]

PREDEFINED_ROLES = [
    {
        "name": "Super Administrator",
        "description": "Full access to every feature of the system",
        "color": "#dc2626",
        "icon": "👑",
        "permissions": list(SYSTEM_PERMISSIONS.values()),
    },
    {
        "name": "Administrator",
        "description": "Global administration of the system and its users",
        "color": "#ea580c",
        "icon": "🛡️",
        "permissions": [
            P["USERS_VIEW"], P["USERS_CREATE"], P["USERS_CREATE_ADMIN"], P["USERS_CREATE_HR"],
            P["USERS_CREATE_MANAGER"], P["USERS_CREATE_EMPLOYEE"], P["USERS_EDIT"],
            P["USERS_DELETE"], P["USERS_MANAGE_ROLES"],
            P["DEPARTMENTS_VIEW"], P["DEPARTMENTS_CREATE"], P["DEPARTMENTS_EDIT"],
            P["DEPARTMENTS_DELETE"],
            P["POSITIONS_VIEW"], P["POSITIONS_CREATE"], P["POSITIONS_EDIT"], P["POSITIONS_DELETE"],
            P["LEAVES_VIEW_ALL"], P["LEAVES_APPROVE"], P["LEAVES_REJECT"],
            P["REPORTS_VIEW"], P["REPORTS_CREATE"], P["ANALYTICS_VIEW"],
            P["SYSTEM_SETTINGS"], P["ROLES_VIEW"], P["ROLES_MANAGE"],
        ] + _EVERYONE,
    },
    {
        "name": "HR Manager",
        "description": "Complete human resources management",
        "color": "#0891b2",
        "icon": "👥",
        "permissions": [
            P["USERS_VIEW"], P["USERS_CREATE"], P["USERS_CREATE_MANAGER"],
            P["USERS_CREATE_EMPLOYEE"], P["USERS_EDIT"], P["USERS_VIEW_SALARY"],
            P["USERS_EDIT_SALARY"],
            P["DEPARTMENTS_VIEW"], P["DEPARTMENTS_MANAGE"],
            P["POSITIONS_VIEW"], P["POSITIONS_CREATE"], P["POSITIONS_EDIT"],
            P["LEAVES_VIEW_ALL"], P["LEAVES_APPROVE"], P["LEAVES_REJECT"],
            P["PAYROLL_VIEW"], P["PAYROLL_MANAGE"],
            P["REPORTS_VIEW"], P["REPORTS_CREATE"], P["ANALYTICS_VIEW"],
        ] + _EVERYONE,
    },
    {
        "name": "HR Specialist",
        "description": "Day-to-day human resources operations",
        "color": "#0d9488",
        "icon": "📋",
        "permissions": [
            P["USERS_VIEW"], P["USERS_EDIT"], P["DEPARTMENTS_VIEW"], P["POSITIONS_VIEW"],
            P["LEAVES_VIEW_ALL"], P["LEAVES_APPROVE"], P["PAYROLL_VIEW"], P["REPORTS_VIEW"],
        ] + _EVERYONE,
    },
    {
        "name": "Manager",
        "description": "Team management and request approval",
        "color": "#7c3aed",
        "icon": "👨‍💼",
        "permissions": [
            P["USERS_VIEW"], P["DEPARTMENTS_VIEW"], P["POSITIONS_VIEW"],
            P["LEAVES_VIEW_TEAM"], P["LEAVES_APPROVE"], P["LEAVES_REJECT"],
            P["EXPENSES_APPROVE"], P["REPORTS_VIEW"],
        ] + _EVERYONE,
    },
    {
        "name": "Accountant",
        "description": "Accounting and finance",
        "color": "#059669",
        "icon": "💰",
        "permissions": [
            P["USERS_VIEW"], P["USERS_VIEW_SALARY"], P["PAYROLL_VIEW"], P["PAYROLL_MANAGE"],
            P["EXPENSES_VIEW"], P["EXPENSES_APPROVE"], P["BUDGET_VIEW"], P["BUDGET_MANAGE"],
            P["REPORTS_VIEW"], P["ANALYTICS_VIEW"],
        ] + _EVERYONE,
    },
    {
        "name": "Employee",
        "description": "Baseline access for employees",
        "color": "#6b7280",
        "icon": "👤",
        "permissions": [P["LEAVES_VIEW_OWN"], P["LEAVES_CREATE"]] + _EVERYONE,
    },
]

_GROUPS = {
    "users": ("Users", "👤"),
    "departments": ("Organization", "🏢"),
    "positions": ("Organization", "🏢"),
    "leaves": ("Leaves", "🏖️"),
    "payroll": ("Finance", "💰"),
    "expenses": ("Finance", "💰"),
    "budget": ("Finance", "💰"),
    "reports": ("Reports", "📊"),
    "analytics": ("Reports", "📊"),
    "system": ("System", "⚙️"),
    "roles": ("Roles", "🔐"),
    "permissions": ("Roles", "🔐"),
    "profile": ("Profile", "🙍"),
}


def _definitions():
    counters = {}
    for key, name in SYSTEM_PERMISSIONS.items():
        category = name.split(".", 1)[0]
        group_name, group_icon = _GROUPS[category]
        counters[group_name] = counters.get(group_name, 0) + 1
        yield {
            "name": name,
            "label": key.replace("_", " ").capitalize(),
            "group_name": group_name,
            "group_icon": group_icon,
            "sort_order": counters[group_name],
        }


DEFAULT_PERMISSION_DEFINITIONS = list(_definitions())

DEFAULT_MENU_ITEMS = [
    {"name": "Dashboard", "path": "/", "icon": "📊", "section": "main", "sort_order": 1,
     "permission": P["REPORTS_VIEW"]},
    {"name": "Attendance", "path": "/attendance", "icon": "⏰", "section": "main", "sort_order": 2,
     "permission": None},
    {"name": "Expenses", "path": "/expenses", "icon": "💰", "section": "main", "sort_order": 3,
     "permission": P["EXPENSES_VIEW"]},
    {"name": "Leaves", "path": "/leaves", "icon": "🏖️", "section": "main", "sort_order": 4,
     "permission": P["LEAVES_VIEW_OWN"]},
    {"name": "Team", "path": None, "icon": "👥", "section": "main", "sort_order": 5,
     "permission": P["DEPARTMENTS_VIEW"], "children": [
         {"name": "Departments", "path": "/departments", "icon": "🏢", "sort_order": 1,
          "permission": P["DEPARTMENTS_VIEW"]},
         {"name": "Positions", "path": "/positions", "icon": "💼", "sort_order": 2,
          "permission": P["POSITIONS_VIEW"]},
         {"name": "Team leaves", "path": "/leaves/team", "icon": "📅", "sort_order": 3,
          "permission": P["LEAVES_VIEW_TEAM"]},
     ]},
    {"name": "Administration", "path": None, "icon": "⚙️", "section": "admin", "sort_order": 1,
     "permission": None, "children": [
         {"name": "Users", "path": "/users", "icon": "👤", "sort_order": 1,
          "permission": P["USERS_VIEW"]},
         {"name": "Roles", "path": "/users/roles", "icon": "🔐", "sort_order": 2,
          "permission": P["ROLES_VIEW"]},
         {"name": "Permissions", "path": "/users/permissions", "icon": "🗝️", "sort_order": 3,
          "permission": P["ROLES_MANAGE"]},
         {"name": "Audit log", "path": "/audit", "icon": "📜", "sort_order": 4,
          "permission": P["SYSTEM_LOGS"]},
     ]},
]
