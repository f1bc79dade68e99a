"""
Registry of SMS sender short-codes.

Indian banks and payment apps send transactional SMS from DLT headers
such as ``VM-HDFCBK`` or ``AD-PHONEPE-S``: a two letter operator prefix,
the registered header, and sometimes a one letter category suffix. The
registry maps headers to institutions; ``looks_like_bank_sender`` covers
headers no one has registered yet.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import structlog

logger = structlog.get_logger()

_OPERATOR_PREFIX = re.compile(r"^[A-Z]{2}-")
_CATEGORY_SUFFIX = re.compile(r"-[A-Z]$")

# Headers ending in these tokens belong to banks or card issuers
_BANK_HEADER_HINT = re.compile(r"(?:BANK|BNK|BK|CARD|CRD|CC|UPI|INB|YONO|FIN)$|^YONO")


@dataclass(frozen=True)
class BankConfig:
    """One institution and the sender ids it uses for transaction SMS."""

    bank_name: str
    display_name: str
    sender_ids: Tuple[str, ...]
    is_payment_app: bool = False


def normalize_sender(sender: str) -> str:
    """Upper-case a sender and drop the operator prefix and category suffix."""
    header = (sender or "").strip().upper()
    header = _OPERATOR_PREFIX.sub("", header)
    return _CATEGORY_SUFFIX.sub("", header)


class BankRegistry:
    """In-memory sender-id index.

    Register everything up front; lookups after that are read-only, so a
    populated registry can be shared between parser threads.
    """

    def __init__(self, configs: Iterable[BankConfig] = ()):
        self._banks: List[BankConfig] = []
        self._by_sender: Dict[str, BankConfig] = {}
        for config in configs:
            self.register_bank(config)

    def register_bank(self, config: BankConfig) -> None:
        self._banks.append(config)
        for sender_id in config.sender_ids:
            # Later registrations win for a shared header
            self._by_sender[sender_id.upper()] = config
            self._by_sender[normalize_sender(sender_id)] = config

    def find_bank_by_sender(self, sender: str) -> Optional[BankConfig]:
        if not sender:
            return None
        raw = sender.strip().upper()
        return self._by_sender.get(raw) or self._by_sender.get(normalize_sender(raw))

    def all_banks(self) -> List[BankConfig]:
        return list(self._banks)

    def __len__(self) -> int:
        return len(self._banks)

    def is_payment_app_sender(self, sender: str) -> bool:
        config = self.find_bank_by_sender(sender)
        return config is not None and config.is_payment_app

    def is_bank_sender(self, sender: str) -> bool:
        """Registered bank header, or one that resembles a bank short-code."""
        config = self.find_bank_by_sender(sender)
        if config is not None:
            return not config.is_payment_app
        return looks_like_bank_sender(sender)


def looks_like_bank_sender(sender: str) -> bool:
    header = normalize_sender(sender)
    if not header or not header.isalnum():
        return False
    return bool(_BANK_HEADER_HINT.search(header))


DEFAULT_BANKS: Tuple[BankConfig, ...] = (
    BankConfig("HDFC Bank", "HDFC", (
        "VM-HDFCBK", "AD-HDFCBK", "HDFCBK", "HDFCBANK", "HDFCCC", "HDFC",
        "HDFCUPI", "VM-HDFCCC", "AD-HDFCCC", "HDFCMB",
    )),
    BankConfig("State Bank of India", "SBI", (
        "VM-SBIINB", "AD-SBIBNK", "SBI", "SBIINB", "SBIPSG", "VM-SBICARD",
        "AD-SBICRD", "SBIUPI", "SBMSMS", "VM-SBIATM", "SBIYONO",
    )),
    BankConfig("ICICI Bank", "ICICI", (
        "VM-ICICIB", "BZ-ICICIB", "ICICIB", "IMOBILE", "ICICIC", "ICICICC",
        "ICICIPB", "ICIUPI", "AD-ICICIB", "ICICIPAY",
    )),
    BankConfig("Axis Bank", "Axis", (
        "VM-AXISBK", "AD-AXISBK", "AXISBK", "AXISBANK", "AXISBNK", "AXISCRD",
        "AXISUPI", "VM-AXISCB", "AD-AXISCB", "AXISMB",
    )),
    BankConfig("Kotak Mahindra Bank", "Kotak", (
        "VK-KOTAKB", "AD-KOTAKB", "KOTAKB", "KOTAK", "KOTAKCC", "KOTAKUPI",
        "VK-KOTAKC", "AD-KOTAKC", "KOTAKMB",
    )),
    BankConfig("Punjab National Bank", "PNB", (
        "VM-PNBSMS", "AD-PNBANK", "PNBSMS", "PNBANK", "PNB", "PNBUPI",
        "PNBMB", "PNBCC", "PNBATM", "AD-PNBCRD",
    )),
    BankConfig("Bank of Baroda", "BoB", (
        "AD-BOBANK", "VM-BOBANK", "BOBANK", "BOBBNK", "BOB", "BOBUPI",
        "BOBMB", "BOBCC", "BOBATM", "AD-BOBCRD",
    )),
    BankConfig("Canara Bank", "Canara", (
        "VM-CANBNK", "AD-CANARA", "CANBNK", "CANARA", "CANARABANK",
        "CANBNKUPI", "CANBNKMB", "CANBNKCC", "CANBNKATM",
    )),
    BankConfig("Union Bank of India", "Union Bank", (
        "VM-UBIONL", "AD-UBIONL", "UBIONL", "UNIONBK", "UNIONBNK", "UBIUPI",
        "UBIMB", "UBICC", "UBIATM", "AD-UNIONB",
    )),
    BankConfig("Central Bank of India", "Central Bank", (
        "VM-CNTBNK", "AD-CNTBNK", "CNTBNK", "CENBNK", "CBINDIA", "CBIUPI",
        "CBIMB", "CBICC", "CBIATM",
    )),
    BankConfig("Indian Bank", "Indian Bank", (
        "VM-INBBNK", "AD-INBBNK", "INBBNK", "INDIANBK", "INBUPI", "INBMB",
        "INBCC", "INBATM",
    )),
    BankConfig("IDFC First Bank", "IDFC First", (
        "VM-IDFCFB", "AD-IDFCFB", "IDFCFB", "IDFCBNK", "IDFC", "IDFCUPI",
        "IDFCMB", "IDFCCC", "IDFCATM",
    )),
    BankConfig("IDBI Bank", "IDBI", (
        "VM-IDBIBK", "AD-IDBIBK", "IDBIBK", "IDBIBNK", "IDBI", "IDBIUPI",
        "IDBIMB", "IDBICC", "IDBIATM",
    )),
    BankConfig("IndusInd Bank", "IndusInd", (
        "AD-INDBNK", "INDBNK", "INDUSIND", "INDUSUPI", "INDUSMB", "INDUSCC",
        "INDUSATM",
    )),
    BankConfig("Yes Bank", "Yes Bank", (
        "VM-YESBNK", "AD-YESBNK", "YESBNK", "YESBANK", "YES", "YESUPI",
        "YESMB", "YESCC", "YESATM",
    )),
    BankConfig("Federal Bank", "Federal Bank", (
        "VM-FEDBNK", "AD-FEDBNK", "FEDBNK", "FEDERALBK", "FEDERAL", "FEDUPI",
        "FEDMB", "FEDCC", "FEDATM",
    )),
    BankConfig("RBL Bank", "RBL Bank", (
        "VM-RBLBNK", "AD-RBLBNK", "RBLBNK", "RBLBANK", "RBL", "RBLUPI",
        "RBLMB", "RBLCC", "RBLATM",
    )),
    BankConfig("Karnataka Bank", "Karnataka Bank", (
        "VM-KTKBNK", "AD-KTKBNK", "KTKBNK", "KARBNK", "KTKBANK", "KTKUPI",
        "KTKMB", "KTKCC", "KTKATM",
    )),
    BankConfig("South Indian Bank", "South Indian Bank", (
        "VM-SIBSMS", "AD-SIBBNK", "SIBSMS", "SIBANK", "SIB", "SIBUPI",
        "SIBMB", "SIBCC", "SIBATM",
    )),
    BankConfig("Bandhan Bank", "Bandhan Bank", (
        "VM-BANDHN", "AD-BANDHN", "BANDHN", "BANDHAN", "BANDHANBK",
        "BANDUPI", "BANDMB", "BANDCC", "BANDATM",
    )),
    BankConfig("India Post Payments Bank", "IPPB", (
        "VM-IPPBSM", "AD-IPPBSM", "IPPBSM", "IPPB", "POSTBK", "IPPBUPI",
        "IPPBMB", "INDIAPOST", "POSTBANK",
    )),
    BankConfig("Paytm Payments Bank", "Paytm Bank", (
        "VM-PAYTMB", "AD-PYTMWL", "PAYTMB", "PYTMWL", "AD-PAYTMB", "PAYTMUPI",
    )),
    BankConfig("Airtel Payments Bank", "Airtel", (
        "VM-AIRTEL", "AD-AIRTPB", "AIRTPB", "AIRTEL", "AIRTELB", "AIRTELPB",
        "AIRTELUPI", "AIRTELMB",
    )),
    BankConfig("Jio Payments Bank", "Jio", (
        "VM-JIOMNY", "AD-JIOMNY", "JIOMNY", "JIOMONEY", "JIOUPI", "JIOMB",
        "JIOBK",
    )),
    BankConfig("Fino Payments Bank", "Fino", (
        "VM-FINOPB", "AD-FINOPB", "FINOPB", "FINO", "FINOBANK", "FINOUPI",
        "FINOMB",
    )),
    BankConfig("Fi Money", "Fi", (
        "FIMONEY", "VM-FIBNK", "AD-FIBNK", "FIUPI", "FIMB", "FICARD",
        "VM-FIMONY", "AD-FIMONY",
    )),
    BankConfig("Jupiter", "Jupiter", (
        "JUPITER", "VM-JUPBK", "AD-JUPBK", "JUPITERBK", "JUPUPI", "JUPMB",
        "JUPCARD", "VM-JUPTER", "AD-JUPTER",
    )),
    BankConfig("Niyo", "Niyo", (
        "NIYO", "VM-NIYO", "AD-NIYO", "NIYOBNK", "NIYOUPI", "NIYOMB",
        "NIYOCARD",
    )),
    BankConfig("OneCard", "OneCard", (
        "ONECARD", "VM-ONECD", "AD-ONECD", "ONECRD", "ONECARDCC",
        "ONECARDUPI", "ONECARDMB",
    )),
    BankConfig("Slice", "Slice", (
        "SLICE", "VM-SLICE", "AD-SLICE", "SLICECC", "SLICECARD", "SLICEUPI",
        "SLICEMB",
    )),
)

PAYMENT_APPS: Tuple[BankConfig, ...] = (
    BankConfig("Google Pay", "Google Pay", (
        "GOOGLEPAY", "GOOGLPAY", "GPAY", "G-PAY", "GOOGLE-PAY",
    ), is_payment_app=True),
    BankConfig("PhonePe", "PhonePe", ("PHONEPE", "PHONPE"), is_payment_app=True),
    BankConfig("Paytm", "Paytm", ("PAYTM", "PYTM", "PYTMPA"), is_payment_app=True),
    BankConfig("Amazon Pay", "Amazon Pay", (
        "AMAZONPAY", "AMAZONP", "AZNPAY", "AMZPAY",
    ), is_payment_app=True),
    BankConfig("BHIM", "BHIM", ("BHIM", "BHIMUPI", "NPCI", "NPCIUPI"), is_payment_app=True),
    BankConfig("CRED", "CRED", (
        "CRED", "CREDPAY", "CREDAPP", "CREDP", "CREDCLUB", "CREDPMT",
    ), is_payment_app=True),
    BankConfig("JioPay", "JioPay", ("JIOPAY",), is_payment_app=True),
    BankConfig("MobiKwik", "MobiKwik", ("MOBIKWIK", "MOBIKW"), is_payment_app=True),
)


def build_default_registry() -> BankRegistry:
    registry = BankRegistry(DEFAULT_BANKS + PAYMENT_APPS)
    logger.debug(
        "bank_registry_built",
        banks=len(DEFAULT_BANKS),
        payment_apps=len(PAYMENT_APPS),
    )
    return registry
