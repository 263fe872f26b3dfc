"""Tests for deterministic project scaffolding."""
import json

import pytest

from vibe_engine.services.template_generator import (
    ScaffoldFlags,
    build_file_set,
    classify,
    derive_component_name,
    render_api_route,
    render_default_component,
    render_env_example,
    render_prisma_schema,
)


def paths_of(files):
    return [f.path for f in files]


class TestDeriveComponentName:

    def test_capitalizes_and_joins_words(self):
        assert derive_component_name("todo list app") == "TodoListApp"

    def test_keeps_inner_capitals(self):
        assert derive_component_name("my iPhone mockup") == "MyIPhoneMockup"

    def test_strips_non_alphabetic(self):
        assert derive_component_name("build a to-do app v2!") == "BuildATodoAppV"

    @pytest.mark.parametrize("prompt", ["", "   ", "123 456", "!!! ???"])
    def test_default_when_nothing_alphabetic(self, prompt):
        assert derive_component_name(prompt) == "App"
        assert derive_component_name(prompt, "Component") == "Component"

    @pytest.mark.parametrize("prompt", [
        "landing page",
        "Build a login page",
        "user database dashboard",
        "42 ways to café ☕",
        "  leading and trailing  ",
    ])
    def test_result_is_alphabetic(self, prompt):
        name = derive_component_name(prompt)
        assert name
        assert name.isascii() and name.isalpha()


class TestClassify:

    def test_login_page_needs_auth_only(self):
        assert classify("build a login page") == ScaffoldFlags(needs_database=False, needs_auth=True)

    def test_user_database_dashboard_needs_both(self):
        assert classify("user database dashboard") == ScaffoldFlags(needs_database=True, needs_auth=True)

    def test_landing_page_needs_nothing(self):
        assert classify("landing page") == ScaffoldFlags(needs_database=False, needs_auth=False)

    def test_case_insensitive(self):
        assert classify("SIGNUP flow with DATA export").needs_auth
        assert classify("SIGNUP flow with DATA export").needs_database

    def test_custom_keyword_table(self):
        table = {"needs_database": ("inventory",), "needs_auth": ("members",)}
        assert classify("inventory tracker", table) == ScaffoldFlags(needs_database=True, needs_auth=False)
        assert classify("members area", table) == ScaffoldFlags(needs_database=False, needs_auth=True)
        assert classify("user database", table) == ScaffoldFlags()


class TestBuildFileSet:

    def test_landing_page_has_only_base_files(self):
        files = build_file_set("landing page")
        assert paths_of(files) == [
            "app/page.tsx",
            "app/api/landingpage/route.ts",
            "lib/utils.ts",
            "types/index.ts",
            ".env.example",
            "package.json",
        ]

    def test_login_page_adds_auth_actions(self):
        paths = paths_of(build_file_set("build a login page"))
        assert paths.count("app/actions/auth.ts") == 1
        assert "prisma/schema.prisma" not in paths

    def test_database_prompt_adds_schema(self):
        paths = paths_of(build_file_set("inventory database"))
        assert paths.count("prisma/schema.prisma") == 1
        assert "app/actions/auth.ts" not in paths

    def test_user_prompt_adds_schema_and_auth(self):
        paths = paths_of(build_file_set("user database dashboard"))
        assert paths.count("prisma/schema.prisma") == 1
        assert paths.count("app/actions/auth.ts") == 1

    def test_supplied_code_becomes_page(self):
        code = "export default function Page() { return null }"
        files = build_file_set("landing page", code)
        assert files[0].path == "app/page.tsx"
        assert files[0].content == code

    def test_default_page_when_code_empty(self):
        files = build_file_set("landing page", "")
        assert files[0].content == render_default_component("landing page")

    def test_languages(self):
        by_path = {f.path: f.language for f in build_file_set("user login database")}
        assert by_path["app/page.tsx"] == "typescript"
        assert by_path["prisma/schema.prisma"] == "prisma"
        assert by_path[".env.example"] == "text"
        assert by_path["package.json"] == "json"

    def test_names_flow_through_files(self):
        files = {f.path: f.content for f in build_file_set("user database dashboard")}
        assert "export interface UserDatabaseDashboard {" in files["types/index.ts"]
        assert "model UserDatabaseDashboard {" in files["prisma/schema.prisma"]
        assert "prisma.userdatabasedashboard.findMany()" in files["app/api/userdatabasedashboard/route.ts"]

    def test_empty_prompt_still_scaffolds(self):
        files = build_file_set("")
        assert len(files) >= 4
        assert "app/api/app/route.ts" in paths_of(files)


class TestManifest:

    def test_base_dependencies(self):
        manifest = json.loads({f.path: f.content for f in build_file_set("landing page")}["package.json"])
        assert manifest["name"] == "landingpage"
        assert set(manifest["dependencies"]) == {"react", "next", "framer-motion", "lucide-react"}
        assert "prisma" not in manifest["devDependencies"]

    def test_conditional_dependencies(self):
        manifest = json.loads({f.path: f.content for f in build_file_set("user login database")}["package.json"])
        assert manifest["dependencies"]["@prisma/client"] == "^5.0.0"
        assert manifest["dependencies"]["next-auth"] == "^4.24.0"
        assert manifest["devDependencies"]["prisma"] == "^5.0.0"


class TestRenderers:

    def test_api_route_echo_stub_without_database(self):
        route = render_api_route("Landing", needs_database=False)
        assert "prisma" not in route
        assert "data: body" in route
        assert "export async function GET" in route and "export async function POST" in route

    def test_api_route_with_database(self):
        route = render_api_route("Orders", needs_database=True)
        assert "import { prisma } from '@/lib/prisma'" in route
        assert "prisma.orders.create({ data: body })" in route

    def test_schema_user_model_only_with_auth(self):
        assert "model User {" in render_prisma_schema("Orders", needs_auth=True)
        assert "model User {" not in render_prisma_schema("Orders", needs_auth=False)

    def test_env_example_lines(self):
        assert render_env_example(False, False) == 'NEXT_PUBLIC_API_URL="http://localhost:3000/api"'
        env = render_env_example(True, True)
        assert env.splitlines()[0].startswith("DATABASE_URL=")
        assert "NEXTAUTH_SECRET" in env and "NEXTAUTH_URL" in env

    def test_default_component_heading_is_prompt(self):
        code = render_default_component("A pricing page for cats")
        assert "A pricing page for cats" in code
        assert "export default function APricingPageForCats()" in code
        assert "initial={{ opacity: 0, y: 20 }}" in code

    def test_default_component_without_prompt(self):
        code = render_default_component("")
        assert "Generated Component" in code
        assert "export default function Component()" in code
