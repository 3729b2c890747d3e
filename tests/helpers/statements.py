"""Sample statement exports shared by the adapter, pipeline and CLI tests.

Each constant is the text of a small but realistic export: bank preamble,
header row and a few records, including records the pipeline must drop.
"""

import textwrap


def dedent(s: str) -> str:
    # Keep internal newlines, but normalize indentation for readability.
    return textwrap.dedent(s).lstrip("\n").rstrip()


CSOB_CSV = dedent(
    """
    Pohyby na účtu 123456789/0300;;;
    Období: 01.01.2025 - 31.01.2025;;;
    ;;;
    číslo účtu;datum zaúčtování;částka;měna;zůstatek;jméno protistrany;variabilní symbol;zpráva;vlastní poznámka;označení operace;kategorie
    123456789/0300;05.01.2025;-1 250,50;CZK;10 000,00;Albert Česká republika;;Nákup potravin;;Platba kartou;Potraviny
    123456789/0300;;-100,00;CZK;;;;chybí datum;;;
    123456789/0300;20.01.2025;45 000,00;CZK;55 000,00;ACME s.r.o.;1234567890;Mzda leden;vyplata;Příchozí úhrada;Příjem
    """
)

MONETA_CSV = dedent(
    """
    "Číslo účtu";"Datum provedení";"Částka";"Měna";"Název protistrany";"Popis transakce";"Variabilní symbol"
    "123456789/0600";"12.03.2025";"-356,90";"CZK";"BILLA s.r.o.";"Platba kartou BILLA";""
    "123456789/0600";"14.03.2025";"-1 200,00";"CZK";"";"Vlak Praha - Brno";"5566"
    """
)

FIO_CSV = dedent(
    """
    "accountId";"2000123456"
    "bankId";"2010"
    "currency";"CZK"
    "iban";"CZ6520100000002000123456"
    "bic";"FIOBCZPPXXX"
    "openingBalance";"10000,00"
    "closingBalance";"11011,00"
    "dateStart";"01.04.2025"
    "dateEnd";"30.04.2025"
    "idFrom";"26001"
    "idTo";"26002"

    "ID pohybu";"Datum";"Objem";"Měna";"Protiúčet";"Kód banky";"Název protiúčtu";"VS";"Poznámka";"Zpráva pro příjemce";"Typ";"Komentář"
    "26001";"02.04.2025";"-489,00";"CZK";"";"";"";"";"Nákup: LEKARNA DR.MAX";"";"Platba kartou";"lékárna"
    "26002";"15.04.2025";"1 500,00";"CZK";"123456/0800";"0800";"Jan Novák";"7788";"";"Díky";"Bezhotovostní příjem";""
    """
)

KB_CSV = dedent(
    """
    Datum vytvoření výpisu;20.05.2025
    Číslo účtu;123-456789/0100

    Datum zaúčtování;Datum splatnosti;Název protiúčtu;Protiúčet;Částka;Měna;VS;Popis transakce
    19.05.2025;19.05.2025;ČEZ Prodej, a.s.;123/0300;-2 450,00;CZK;998877;ČEZ záloha elektřina
    10.05.2025;10.05.2025;TESCO STORES ČR;;-812,40;CZK;;TESCO STORES
    12.05.2025;12.05.2025;;;0,00;CZK;;Poplatek zrušen
    """
)

GENERIC_CSV = dedent(
    """
    Export transakcí
    Datum;Částka;Popis
    03.02.2025;-899,00;CS ORLEN Praha 4
    04.02.2025;15 000,00;Výplata
    """
)
