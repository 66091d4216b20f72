WELCOME_SUBJECT = "Welcome!"
PURCHASE_SUBJECT = "Thank you for your purchase!"


def payment_success_html() -> str:
    lines = [
        "<html>",
        "<body style=\"font-family: sans-serif; background-color: #ffffff;\">",
        "<h1>Payment successful 🎉</h1>",
        "<p>Thanks for choosing PaperAI. Your payment went through and your account is ready.</p>",
        "<p>If you have any questions, just reply to this email.</p>",
        "<p>The PaperAI team</p>",
        "</body>",
        "</html>",
    ]
    return "\n".join(lines)
