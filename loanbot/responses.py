import logging
from dataclasses import dataclass, field
from difflib import SequenceMatcher
from typing import List, Optional

from loanbot import config
from loanbot.text import normalize_text, tokenize, words

logger = logging.getLogger(__name__)

# ========= Canned texts =========
ABOUT_COMPANY = (
    "Fundobaba is a leading digital lending platform backed by RBI-registered NBFC UY Fincorp. "
    "We specialize in quick pay-day loans that are fast, safe, and hassle-free. Our mission is to "
    "provide instant financial assistance when you need it most."
)
ABOUT_COMPANY_REGULATED = ABOUT_COMPANY + " We're completely legitimate and regulated by RBI."

DOCUMENTS_NEEDED = (
    "For a Fundobaba loan, you only need:\n\n"
    "• Mobile number\n• PAN number\n• Aadhaar number\n• Last 3 months bank statement\n\n"
    "That's it! We don't even need photos of your PAN or Aadhaar cards - just the numbers. "
    "We keep it super simple and hassle-free!"
)
DOCUMENTS_FOR_APPLICATION = (
    "For your application, you'll need:\n\n"
    "• Mobile number\n• PAN number\n• Aadhaar number\n• Last 3 months bank statement\n\n"
    "That's it! We don't even need photos of your PAN or Aadhaar cards - just the numbers. "
    "We keep it super simple and hassle-free!"
)

LOAN_RANGE_HISTORY = (
    "At Fundobaba, we offer pay-day loans ranging from ₹5,000 to ₹1,00,000 (1 lakh). The exact "
    "amount you can borrow depends on your income, credit history, and repayment capacity. Our "
    "quick assessment process helps determine the best loan amount for your needs."
)
LOAN_RANGE = LOAN_RANGE_HISTORY.replace("credit history", "credit score")
LOAN_RANGE_INTRO = (
    "Great question! Fundobaba offers quick pay-day loans ranging from ₹5,000 to ₹1,00,000. We're "
    "backed by RBI-registered NBFC UY Fincorp, so you can trust us completely. Our loans are "
    "designed to help you bridge financial gaps until your next paycheck. Would you like to know "
    "more about our application process?"
)
LOAN_URGENT = (
    "I understand you need quick financial assistance! Fundobaba is perfect for urgent needs - we "
    "can disburse loans in under 5 minutes once approved. Our application process is super fast "
    "and requires minimal documentation. Would you like to start your application now?"
)
BORROW_RANGE = (
    "You can borrow between ₹5,000 to ₹1,00,000 (1 lakh) from Fundobaba. The exact amount depends "
    "on your income, credit score, and repayment capacity. Our system will show you the maximum "
    "amount you're eligible for during the application process."
)

INTEREST_RATES = (
    "Our pay-day loan interest rates are competitive and transparent. Rates typically range from "
    "1% per month depending on the loan amount and tenure. We believe in complete transparency - "
    "all charges are clearly communicated upfront with no hidden fees."
)
INTEREST_RATES_DETAIL = (
    "Our interest rates are competitive and transparent:\n\n"
    "• Starting from 1% per month\n• No hidden charges\n• All fees clearly communicated upfront\n"
    "• Transparent loan document shows all terms\n\n"
    "We believe in complete transparency - you'll see exactly what you're paying before you sign."
)

_PROCESS_STEPS = (
    "1. Enter your mobile number, PAN number, and Aadhaar number\n"
    "2. Upload your last 3 months bank statement\n"
    "3. Complete e-KYC verification\n"
    "4. E-sign the transparent loan document showing all terms\n"
    "5. Get loan disbursed in less than 5 minutes!\n\n"
)
APPLICATION_PROCESS = (
    "Applying for a Fundobaba pay-day loan is incredibly simple and fast! Here's our streamlined "
    "process:\n\n" + _PROCESS_STEPS +
    "That's it! No complex paperwork, no document photos needed - just a few simple steps and you "
    "get your loan instantly!"
)
APPLICATION_READY = (
    "Perfect! You're ready to apply. Our process is incredibly simple:\n\n" + _PROCESS_STEPS +
    "No complex paperwork, no document photos needed - just a few simple steps!"
)
HOW_TO_APPLY = (
    "To apply for a Fundobaba loan:\n\n"
    "1. Visit fundobaba.com or download our mobile app\n"
    "2. Click \"Apply Now\" and enter your PAN and mobile number\n"
    "3. Verify OTP and complete your profile\n"
    "4. Upload your 3-month bank statement\n"
    "5. Complete e-KYC verification\n"
    "6. E-sign the transparent loan document\n"
    "7. Get instant approval and disbursal in under 5 minutes!\n\n"
    "It's that simple! No complex paperwork or lengthy processes."
)
PROCESS_DURATION = (
    "The complete application process takes just 5 minutes! Our e-KYC verification is instant, and "
    "once you e-sign the transparent loan document, your loan gets disbursed in less than 5 "
    "minutes. No waiting, no delays!"
)

_REPAY_STEPS = (
    "1. Go to your dashboard in the app or website\n"
    "2. Click on the \"Repay\" button\n"
    "3. Choose your payment method (UPI, net banking, etc.)\n"
    "4. Complete the payment\n\n"
    "You can also repay early if you want to save on interest charges. The repayment date is "
    "clearly mentioned in your loan agreement."
)
HOW_TO_REPAY = "Repaying your Fundobaba loan is easy:\n\n" + _REPAY_STEPS
REPAY_STEPS = "To repay your loan:\n\n" + _REPAY_STEPS
REPAYMENT_DATE = (
    "We'll show you the repayment date of your loan on the loan document. And if you have received "
    "the loan, just visit your dashboard and check the repayment date of your loan. Click on the "
    "repayment button to make the repayment."
)
EARLY_REPAYMENT = (
    "Yes, you can repay your loan early! Early repayment is encouraged and may have benefits like "
    "improved credit score. You can make early repayment through your dashboard using UPI, net "
    "banking, or other digital payment methods."
)
NO_EMI = (
    "No, we currently don't offer EMI format. However, sometimes we do take payment in partial "
    "payments when approved by our team. For regular repayment, you need to pay the full amount "
    "on the due date."
)

_ELIGIBILITY_LIST = (
    "• Age: 21-65 years\n• Indian resident with valid ID\n• Regular income source\n"
    "• Active bank account\n• Good credit history (we also consider first-time borrowers)\n\n"
    "We have flexible eligibility criteria to help more people access quick loans."
)
CAN_GET_LOAN = (
    "Yes, you can get a loan from Fundobaba if you meet our eligibility criteria:\n\n" + _ELIGIBILITY_LIST
)
ELIGIBILITY_QUALIFY = (
    "To qualify for a Fundobaba pay-day loan, you need:\n\n" + _ELIGIBILITY_LIST +
    " Would you like to check if you're eligible?"
)
ELIGIBILITY_CRITERIA = (
    "To get a loan from Fundobaba, you need:\n\n"
    "• CIBIL score greater than 600\n• Salary greater than ₹40,000 per month\n"
    "• PAN and Aadhaar should be linked\n• 3 months bank statement ready\n\n"
    "Make sure you have all these documents handy before applying!"
)
CAN_APPLY = (
    "Absolutely! You can apply for a Fundobaba loan right now. Our application process is 100% "
    "online and takes just 5 minutes. You can apply through our website or mobile app anytime, "
    "anywhere. No need to visit any office or meet anyone in person."
)

WHY_FUNDOBABA = (
    "Fundobaba stands out because:\n\n"
    "• Instant approval and disbursal in under 5 minutes\n"
    "• Minimal documentation - just PAN, Aadhaar, and bank statement\n"
    "• Transparent terms with no hidden charges\n"
    "• Backed by RBI-registered NBFC UY Fincorp\n"
    "• 24/7 digital platform\n"
    "• Excellent customer support\n"
    "• Loyalty points and referral rewards\n\n"
    "We make borrowing simple, fast, and trustworthy!"
)
WHY_KYC = (
    "PAN and Aadhaar are required because:\n\n"
    "• They are mandatory for KYC verification as per RBI regulations\n"
    "• They help us verify your identity quickly and securely\n"
    "• They are linked to your bank account for loan disbursal\n"
    "• They ensure compliance with financial regulations\n"
    "• They help prevent fraud and money laundering\n\n"
    "This is standard practice for all financial institutions in India."
)

SUPPORT_URGENT = (
    "For urgent support, please call us immediately at +91 8882400700. Our support team is "
    "available from 09:00 AM to 05:30 PM (Monday to Saturday). For general queries, you can also "
    "email us at support@fundobaba.com."
)
SUPPORT_CONTACT = (
    "Call Support: +91 8882400700\n"
    "Email Support: support@fundobaba.com\n"
    "For general queries: info@fundobaba.com\n"
    "Customer Support Hours: 09:00 AM to 05:30 PM (Monday to Saturday)\n"
    "Grievance Officer: Swati Aggarwal (+91-8655367146, grievance@fundobaba.com)\n\n"
    "Corporate Office:\n"
    "Vaman Techno Centre B-Wing, Ground Floor,\n"
    "Marol Naka, Makwana Road\n"
    "Off Andheri-Kurla Road, Andheri East,\n"
    "Mumbai, 400059"
)
TECHNICAL_HELP = (
    "I'm sorry you're experiencing technical issues. Please try:\n\n"
    "1. Refreshing the page or restarting the app\n"
    "2. Clearing your browser cache\n"
    "3. Checking your internet connection\n\n"
    "If the problem persists, please contact our technical support at +91 8882400700 or email us "
    "at support@fundobaba.com. We'll help you resolve the issue quickly."
)
LOAN_STATUS = (
    "You can check your loan status through your dashboard on the website or mobile app. Statuses "
    "include: Applied, Under Review, Approved, Disbursed, Active, and Closed. You can download your "
    "sanction letter and other loan documents from your dashboard."
)


def _has_any(text, phrases):
    return any(p in text for p in phrases)


# ========= Question-type handlers =========
def handle_what(message, context):
    m = normalize_text(message)
    if _has_any(m, ("what is fundobaba", "what is this")):
        return ABOUT_COMPANY
    if _has_any(m, ("what documents", "what papers", "what do i need")):
        return DOCUMENTS_NEEDED
    if _has_any(m, ("what amount", "what loan amount", "how much can i get", "what max amount",
                    "what maximum amount", "what highest amount")):
        return LOAN_RANGE_HISTORY
    if _has_any(m, ("what interest", "what rate", "what charges")):
        return INTEREST_RATES
    if _has_any(m, ("what is the process", "what are the steps")):
        return APPLICATION_PROCESS
    return None


def handle_how(message, context):
    m = normalize_text(message)
    if _has_any(m, ("how to apply", "how do i apply")):
        return HOW_TO_APPLY
    if "how much" in m and _has_any(m, ("loan", "borrow")):
        return BORROW_RANGE
    if "how long" in m and _has_any(m, ("process", "time")):
        return PROCESS_DURATION
    if _has_any(m, ("how to repay", "how do i pay")):
        return HOW_TO_REPAY
    return None


def handle_capability(message, context):
    m = normalize_text(message)
    if "can i get" in m and "loan" in m:
        return CAN_GET_LOAN
    if _has_any(m, ("can i apply", "can i borrow")):
        return CAN_APPLY
    if _has_any(m, ("can i repay early", "can i pay before")):
        return EARLY_REPAYMENT
    return None


def handle_why(message, context):
    m = normalize_text(message)
    if _has_any(m, ("why fundobaba", "why choose")):
        return WHY_FUNDOBABA
    if _has_any(m, ("why pan", "why aadhaar")):
        return WHY_KYC
    return None


QUESTION_HANDLERS = {
    "what": handle_what,
    "how": handle_how,
    "can": handle_capability,
    "could": handle_capability,
    "why": handle_why,
}


# ========= Category handlers =========
def handle_loan_inquiry(context):
    if context.journey.stage == "awareness":
        return LOAN_RANGE_INTRO
    if context.urgency.level == "high":
        return LOAN_URGENT
    return LOAN_RANGE


def handle_application_process(context):
    if context.journey.stage == "consideration":
        return APPLICATION_READY
    return APPLICATION_PROCESS


def handle_eligibility(context):
    if context.journey.stage == "interest":
        return ELIGIBILITY_QUALIFY
    return ELIGIBILITY_CRITERIA


def handle_documents(context):
    if context.journey.stage == "consideration":
        return DOCUMENTS_FOR_APPLICATION
    return DOCUMENTS_NEEDED


def handle_repayment(context):
    if context.journey.stage == "post_application":
        return REPAY_STEPS
    return REPAYMENT_DATE


def handle_interest_charges(context):
    if context.journey.stage == "interest":
        return INTEREST_RATES_DETAIL
    return INTEREST_RATES


def handle_company_info(context):
    if context.journey.stage == "awareness":
        return ABOUT_COMPANY_REGULATED
    return ABOUT_COMPANY


def handle_support_contact(context):
    if context.urgency.level == "high":
        return SUPPORT_URGENT
    return SUPPORT_CONTACT


CATEGORY_HANDLERS = {
    "loan_inquiry": handle_loan_inquiry,
    "application_process": handle_application_process,
    "eligibility": handle_eligibility,
    "documents": handle_documents,
    "repayment": handle_repayment,
    "interest_charges": handle_interest_charges,
    "company_info": handle_company_info,
    "support_contact": handle_support_contact,
    "technical_issues": lambda context: TECHNICAL_HELP,
    "loan_status": lambda context: LOAN_STATUS,
}


def contextual_response(message, context):
    """Reply picked from question type, category, journey stage and urgency, or None.

    A question-type handler that finds nothing ends the lookup; the category
    handlers are only consulted for other question types.
    """
    handler = QUESTION_HANDLERS.get(context.question_type)
    if handler is not None:
        return handler(message, context)

    category_handler = CATEGORY_HANDLERS.get(context.semantic.category)
    if category_handler is not None:
        return category_handler(context)

    if _has_any(normalize_text(message), ("emi", "installment", "monthly payment")):
        return NO_EMI
    return None


# ========= Pattern scoring =========
@dataclass(frozen=True)
class PatternScore:
    pattern: str
    score: float
    total_score: float
    keyword_count: int
    index: int
    exact: bool


@dataclass(frozen=True)
class BestMatch:
    pattern: str
    score: float
    confidence: float
    all_scores: List[PatternScore] = field(default_factory=list)


def score_pattern(message, pattern, index, tables):
    lower = normalize_text(message)
    tokens = tokenize(message)
    pattern_lower = pattern.lower()
    pattern_words = pattern_lower.split()
    important, common = tables.important_keywords, tables.common_words

    total, count = 0.0, 0
    exact = bool(pattern_lower) and pattern_lower in lower
    if exact:
        total += 3.0
        count += 1

    for word in pattern_words:
        if word in tokens:
            if word in important:
                total += important[word]
                count += 1
            elif word in common:
                total += common[word]
            else:
                total += 1.0
                count += 1

    # a full word match also earns partial credit here
    for word in pattern_words:
        for token in tokens:
            if word in token or token in word:
                if word in important:
                    total += important[word] * 0.7
                elif word not in common:
                    total += 0.7

    # whole words only, so "scan" does not count as "can"
    if any(w in tables.interrogatives for w in words(message)):
        total += 0.5

    score = total / count if count > 0 else total
    return PatternScore(pattern, score, total, count, index, exact)


def calculate_response_scores(message, patterns, tables):
    """Score every pattern; exact substring hits first, then by score, then table order."""
    scores = [score_pattern(message, p, i, tables) for i, p in enumerate(patterns)]
    scores.sort(key=lambda s: (not s.exact, -s.score, s.index))
    return scores


def select_best_response(message, patterns, tables, threshold=config.SELECT_THRESHOLD):
    scores = calculate_response_scores(message, patterns, tables)
    logger.debug("Response scores: %s", ", ".join(f"{s.pattern}: {s.score:.2f}" for s in scores[:5]))

    if scores and scores[0].score >= threshold:
        top = scores[0]
        return BestMatch(
            pattern=top.pattern,
            score=top.score,
            confidence=min(top.score / 3.0, 1.0),
            all_scores=scores,
        )
    return None


# ========= Fuzzy matching =========
@dataclass(frozen=True)
class FuzzyMatch:
    match: Optional[object]
    confidence: float
    matched_variation: Optional[str] = None


def has_word_boundary_match(message, keyword):
    msg_words = message.split()
    return all(
        any(kw in w or w in kw for w in msg_words)
        for kw in keyword.split()
    )


def find_best_match(message, patterns, threshold=config.FUZZY_THRESHOLD):
    """Best of ``patterns`` by substring, then word overlap, then difflib similarity.

    A pattern may be a string or a list of alternative keywords.
    """
    lower = normalize_text(message)
    best, best_score = None, 0.0

    for pattern in patterns:
        keywords = pattern if isinstance(pattern, (list, tuple)) else [pattern]
        for keyword in keywords:
            k = keyword.lower()
            if k in lower:
                score = 1.0
            elif has_word_boundary_match(lower, k):
                score = 0.9
            else:
                score = SequenceMatcher(None, lower, k).ratio()
                if score < threshold:
                    continue
            if score > best_score:
                best, best_score = pattern, score

    return FuzzyMatch(best, best_score)


def find_pattern_match(message, tables, patterns=None):
    lower = normalize_text(message)
    for name, variations in tables.phrase_variations.items():
        for variation in variations:
            if variation in lower:
                return FuzzyMatch(name, 0.95, variation)

    if patterns is None:
        patterns = tables.patterns
    return find_best_match(message, patterns, config.FUZZY_THRESHOLD)
