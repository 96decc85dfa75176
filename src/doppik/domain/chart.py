"""SKR03 default chart of accounts (7-digit codes)."""

from doppik.domain.entities import AccountType

_A = AccountType.ASSET
_L = AccountType.LIABILITY
_E = AccountType.EQUITY
_R = AccountType.REVENUE
_X = AccountType.EXPENSE

CLEARING_ACCOUNT_CODE = "9000000"

SKR03_ACCOUNTS: list[tuple[str, str, AccountType]] = [
    # Class 0: fixed assets and long-term capital
    ("0010000", "Konzessionen, Lizenzen", _A),
    ("0027000", "EDV-Software", _A),
    ("0035000", "Geschäfts- oder Firmenwert", _A),
    ("0050000", "Unbebaute Grundstücke", _A),
    ("0090000", "Geschäftsbauten", _A),
    ("0200000", "Technische Anlagen und Maschinen", _A),
    ("0320000", "PKW", _A),
    ("0400000", "Betriebsausstattung", _A),
    ("0410000", "Geschäftsausstattung", _A),
    ("0420000", "Büroeinrichtung", _A),
    ("0480000", "Geringwertige Wirtschaftsgüter (GWG) bis 800 €", _A),
    ("0485000", "Wirtschaftsgüter (Sammelposten)", _A),
    ("0500000", "Anteile an verbundenen Unternehmen", _A),
    ("0800000", "Gezeichnetes Kapital", _E),
    ("0860000", "Gewinnvortrag vor Verwendung", _E),
    ("0950000", "Pensionsrückstellungen", _L),
    ("0970000", "Sonstige Rückstellungen", _L),
    ("0980000", "Aktive Rechnungsabgrenzung", _A),
    # Class 1: current assets, payables, taxes, private
    ("1000000", "Kasse", _A),
    ("1100000", "Postbank", _A),
    ("1200000", "Bank (Girokonto)", _A),
    ("1210000", "Bank 2 (Sparkonto/Tagesgeld)", _A),
    ("1220000", "Verrechnungskonto Kreditkarten (VISA/MC)", _A),
    ("1360000", "Geldtransit", _A),
    ("1400000", "Forderungen a.L.L.", _A),
    ("1500000", "Sonstige Vermögensgegenstände", _A),
    ("1530000", "Forderungen gegen Personal", _A),
    ("1570000", "Abziehbare Vorsteuer", _A),
    ("1571000", "Abziehbare Vorsteuer 7%", _A),
    ("1576000", "Abziehbare Vorsteuer 19%", _A),
    ("1600000", "Verbindlichkeiten a.L.L.", _L),
    ("1700000", "Sonstige Verbindlichkeiten", _L),
    ("1705000", "Darlehen", _L),
    ("1740000", "Verbindlichkeiten aus Lohn und Gehalt", _L),
    ("1741000", "Verbindlichkeiten Lohnsteuer", _L),
    ("1742000", "Verbindlichkeiten Soz.Vers.", _L),
    ("1770000", "Umsatzsteuer", _L),
    ("1771000", "Umsatzsteuer 7%", _L),
    ("1776000", "Umsatzsteuer 19%", _L),
    ("1780000", "Umsatzsteuer-Vorauszahlungen", _L),
    ("1790000", "Umsatzsteuer Vorjahr", _L),
    ("1800000", "Privatentnahmen", _E),
    ("1890000", "Privateinlagen", _E),
    # Class 2: interest and taxes on income
    ("2100000", "Zinsen und ähnliche Aufwendungen", _X),
    ("2200000", "Körperschaftsteuer", _X),
    ("2300000", "Sonstige Rückstellungen (Klasse 2)", _L),
    ("2650000", "Sonstige Zinsen und ähnliche Erträge", _R),
    # Class 3: goods and materials
    ("3200000", "Wareneingang 7% Vorsteuer", _X),
    ("3400000", "Wareneingang 19% Vorsteuer", _X),
    ("3800000", "Anschaffungsnebenkosten", _X),
    ("3980000", "Bestand Waren", _A),
    # Class 4: operating expenses
    ("4100000", "Löhne und Gehälter", _X),
    ("4130000", "Gesetzliche soziale Aufwendungen", _X),
    ("4210000", "Miete", _X),
    ("4240000", "Gas, Strom, Wasser", _X),
    ("4360000", "Versicherungen", _X),
    ("4500000", "Fahrzeugkosten", _X),
    ("4600000", "Werbekosten", _X),
    ("4660000", "Reisekosten Arbeitnehmer", _X),
    ("4830000", "Abschreibungen auf Sachanlagen", _X),
    ("4855000", "Sofortabschreibung GWG", _X),
    ("4900000", "Sonstige betriebliche Aufwendungen", _X),
    ("4910000", "Porto", _X),
    ("4920000", "Telefon", _X),
    ("4930000", "Bürobedarf", _X),
    ("4950000", "Rechts- und Beratungskosten", _X),
    ("4970000", "Nebenkosten des Geldverkehrs", _X),
    # Class 8: revenue
    ("8200000", "Erlöse (Umsatzsteuerfrei)", _R),
    ("8300000", "Erlöse 7% USt", _R),
    ("8400000", "Erlöse 19% USt", _R),
    ("8401000", "Erlöse aus Beratungsleistungen 19%", _R),
    ("8910000", "Unentgeltliche Wertabgaben (Eigenverbrauch) 19%", _R),
    # Class 9: carry-forward clearing account
    (CLEARING_ACCOUNT_CODE, "Saldenvorträge Sachkonten", _E),
]
