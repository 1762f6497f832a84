# Models package — re-exports the public scan models.
# Prefer importing from the specific submodule (e.g. cookie_scanner.models.cookies).

from cookie_scanner.models.consent import ConsentOutcome as ConsentOutcome
from cookie_scanner.models.cookies import (
    ClassificationRule as ClassificationRule,
    ClassifiedCookie as ClassifiedCookie,
    CookieCategory as CookieCategory,
    PartyType as PartyType,
    RawCookie as RawCookie,
)
from cookie_scanner.models.scan import (
    CookieUpdate as CookieUpdate,
    PageVisit as PageVisit,
    ScanRequest as ScanRequest,
    ScanResult as ScanResult,
)
