from fw_eval.grading.graders import (
    any_of,
    contains,
    define_graders,
    judge,
    matches,
)

graders = define_graders(
    {
        "verifies_signature": any_of(
            matches(r"await\s+verifyWebhook\s*\("),
            contains("new Webhook("),
        ),
        "post_handler": matches(r"export\s+async\s+function\s+POST"),
        "signing_secret_env": contains("CLERK_WEBHOOK_SIGNING_SECRET"),
        "rejects_bad_signature": judge(
            "Does the handler return a 4xx response when verification fails?"
        ),
    }
)
