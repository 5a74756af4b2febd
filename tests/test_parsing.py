from folha_analitica.config import LayoutConfig, load_layout
from folha_analitica.events import ScanMode
from folha_analitica.parsing import ParseContext, extract_employees, step

CFG = load_layout()

FOLHA = [
    "FOLHA ANALÍTICA - 03/2024",
    "UNICEUMA - ANIL",
    "JOSE DA SILVA",
    "123456",
    "PROFESSOR",
    "SEÇÃO: ENSINO SUPERIOR",
    "ADMISSÃO: 01/02/2020",
    "SALÁRIO BASE:",
    "3.000,00",
    "Evento Descrição Ref. Proventos Descontos",
    "0001 SALARIO 30 3.000,00 -",
    "0200 INSS 11,00 - 330,00",
    "TOTAL BRUTO: 3.000,00",
    "TOTAL LÍQUIDO: 2.670,00",
    "BASE INSS: 3.000,00",
    "BASE FGTS: 3.000,00",
    "FGTS DO MÊS: 240,00",
    "MARIA SOUZA",
    "654321",
    "ANALISTA",
    "FILIAL: UNICEUMA RENASCENÇA",
    "descontos", "proventos", "ref.", "descrição", "evento",
    "2.500,00", "30", "SALARIO", "0001",
    "-100,00", "01", "VALE", "TRANSPORTE", "0300",
    "Total Bruto",
    "2.500,00",
]


def test_two_employees():
    jose, maria = extract_employees(FOLHA, CFG)

    assert jose.name == "JOSE DA SILVA"
    assert jose.matricula == "123456"
    assert jose.funcao == "PROFESSOR"
    assert jose.secao == "ENSINO SUPERIOR"
    assert jose.filial == "UNICEUMA - ANIL"
    assert jose.admissao == "01/02/2020"
    assert jose.salario_base == 3000.0
    assert jose.valores.bruto == 3000.0
    assert jose.valores.liquido == 2670.0
    assert jose.bases.inss == 3000.0
    assert jose.bases.fgts == 3000.0
    assert jose.valores.fgts_acumulado == 240.0

    assert maria.name == "MARIA SOUZA"
    assert maria.funcao == "ANALISTA"
    assert maria.filial == "UNICEUMA RENASCENÇA"
    assert [(e.codigo, e.tipo, e.valor) for e in maria.eventos] == [
        ("0001", "SALARIO", 2500.0),
        ("0300", "VALE TRANSPORTE", -100.0),
    ]
    assert maria.valores.bruto == 2500.0
    assert maria.valores.total_descontos == 0
    assert maria.valores.liquido == 2500.0
    assert all(b.startswith("A: ") for b in maria.eventos_brutos)


def test_table_rows_are_captured_twice_by_default():
    jose = extract_employees(FOLHA, CFG)[0]
    assert len(jose.eventos) == 4
    assert len(jose.eventos_brutos) == 4
    assert jose.valores.total_descontos == 660.0


def test_deduplicate_events_option():
    cfg = LayoutConfig.model_validate({**CFG.model_dump(), "deduplicate_events": True})
    jose = extract_employees(FOLHA, cfg)[0]
    assert [(e.codigo, e.valor) for e in jose.eventos] == [("0001", 3000.0), ("0200", 330.0)]
    assert jose.valores.total_descontos == 330.0


def test_events_belong_to_their_own_employee():
    lines = [
        "ANA", "111111", "0001 SALARIO 30 1.000,00 -",
        "BIA", "222222", "0002 BONUS 01 50,00 -",
    ]
    ana, bia = extract_employees(lines, CFG)
    assert [e.codigo for e in ana.eventos] == ["0001"]
    assert [e.codigo for e in bia.eventos] == ["0002"]


def test_draft_without_name_is_dropped():
    lines = ["111111", "0001 X 01 10,00 -", "JOAO", "222222"]
    employees = extract_employees(lines, CFG)
    assert [e.matricula for e in employees] == ["222222"]
    assert employees[0].eventos == []


def test_each_boundary_finalizes_previous_once():
    lines = ["A", "111111", "B", "222222", "C", "333333"]
    employees = extract_employees(lines, CFG)
    assert [e.matricula for e in employees] == ["111111", "222222", "333333"]
    assert [e.name for e in employees] == ["A", "B", "C"]
    assert len({e.id for e in employees}) == 3


def test_malformed_input_never_raises():
    assert extract_employees([], CFG) == []
    assert extract_employees(["", "   ", "abc", "1.2.3,,", "0001", "TOTAL BRUTO:"], CFG) == []


def test_step_boundary():
    lines = ["JOSE", "123456", "PROFESSOR"]
    res = step(lines, 1, ParseContext(), CFG)
    assert res.employee is None
    assert res.next_index == 2
    assert res.context.draft.matricula == "123456"

    res2 = step(["MARIA", "654321"], 1, res.context, CFG)
    assert res2.employee.name == "JOSE"
    assert res2.context.draft.name == "MARIA"
    assert res2.context.acc.eventos == ()


def test_step_mode_transitions():
    ctx = ParseContext()
    lines = [
        "Evento Descrição Ref. Proventos Descontos",
        "0001 SALARIO 30 10,00 -",
        "TOTAL BRUTO: 10,00",
        "0002 EXTRA 01 5,00",
        "",
        "OBS",
    ]
    modes = []
    i = 0
    while i < len(lines):
        res = step(lines, i, ctx, CFG)
        ctx = res.context
        modes.append(ctx.mode)
        i = res.next_index
    assert modes == [
        ScanMode.INSIDE_TABLE,
        ScanMode.INSIDE_TABLE,
        ScanMode.AFTER_TOTALS_SCAN,
        ScanMode.AFTER_TOTALS_SCAN,
        ScanMode.AFTER_TOTALS_SCAN,
        ScanMode.SCANNING,
    ]


def test_step_does_not_mutate_context():
    ctx = ParseContext()
    step(["Evento Descrição Ref. Proventos Descontos"], 0, ctx, CFG)
    assert ctx.mode is ScanMode.SCANNING


def test_multiline_table_moves_cursor():
    lines = ["descontos", "proventos", "ref.", "descrição", "evento",
             "10,00", "01", "X", "0001", "OBS"]
    res = step(lines, 0, ParseContext(), CFG)
    assert res.next_index == 9
    assert len(res.context.acc.eventos) == 1


def test_deduplicate_keeps_desconto_with_same_amount():
    cfg = LayoutConfig.model_validate({**CFG.model_dump(), "deduplicate_events": True})
    lines = ["ANA", "111111", "Evento Descrição Ref. Proventos Descontos",
             "0300 AJUSTE 01 10,00 10,00"]
    (ana,) = extract_employees(lines, cfg)
    assert [(e.codigo, e.valor) for e in ana.eventos] == [("0300", 10.0), ("0300", 10.0)]
    assert len(ana.proventos) == 1
    assert len(ana.descontos) == 1
    assert ana.valores.liquido == 0


def test_multiline_table_stops_before_next_matricula():
    lines = [
        "ANA", "111111",
        "descontos", "proventos", "ref.", "descrição", "evento",
        "10,00", "01", "SALARIO", "0001",
        "2.500,00", "MARIA", "654321", "ANALISTA",
        "0002 BONUS 01 50,00 -", "0003",
    ]
    ana, maria = extract_employees(lines, CFG)
    assert ana.matricula == "111111"
    assert [e.codigo for e in ana.eventos] == ["0001"]
    assert maria.matricula == "654321"
    assert maria.funcao == "ANALISTA"
    assert [e.codigo for e in maria.eventos] == ["0002"]
