import re

from fw_eval.grading.graders import check, contains, define_graders, matches

_CATCH_ALL = re.compile(r"sign-in/\[\[\.\.\.sign-in\]\]/page\.(tsx|jsx)")


def _no_pages_router(response: str) -> bool:
    return "pages/sign-in" not in response


graders = define_graders(
    {
        "sign_in_component": matches(r"<SignIn\b"),
        "imports_clerk_nextjs": contains("@clerk/nextjs"),
        "catch_all_route": matches(_CATCH_ALL),
        "app_router_only": check(_no_pages_router),
    }
)
