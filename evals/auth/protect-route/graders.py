from fw_eval.grading.graders import (
    all_of,
    contains,
    contains_any,
    define_graders,
    judge,
    matches,
)

graders = define_graders(
    {
        "middleware_file": contains_any(["middleware.ts", "middleware.js"]),
        "uses_clerk_middleware": matches(r"clerkMiddleware\s*\("),
        "route_matcher": all_of(
            contains("createRouteMatcher"),
            contains("/dashboard"),
        ),
        "protects_request": contains_any(["auth.protect()", "auth().protect()"]),
        "keeps_public_pages": judge(
            "Does the solution leave `/` and `/pricing` reachable without signing in?"
        ),
    }
)
