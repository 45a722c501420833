# apps/board/protocolo.py

"""
Protocolo de movimentação de tarefas (lado do cliente)

Funções puras sobre snapshots imutáveis: uma tupla de TarefaLocal por
board. Nenhuma função aqui faz I/O; quem chama (cliente.SessaoKanban)
aplica o resultado no cache e conversa com a API.

Fluxo de um drop:
    1. resolver_coluna_alvo: o alvo é uma coluna ou uma tarefa
    2. calcular_movimento: MudancaColuna, Reordenacao ou None (drop inválido)
    3. aplicar_* no snapshot (otimista) e, em caso de falha, reverter_*
"""

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union


# === REFERÊNCIAS (cor / responsável) ===

@dataclass(frozen=True)
class Resolvida:
    """Referência que veio populada pela API"""
    objeto: Any

    @property
    def id(self):
        return self.objeto.id


@dataclass(frozen=True)
class NaoResolvida:
    """Referência que veio apenas como id"""
    id: Any


Referencia = Optional[Union[Resolvida, NaoResolvida]]


@dataclass(frozen=True)
class Cor:
    id: int
    nome: str
    valor: str

    @classmethod
    def do_json(cls, dados: Dict) -> 'Cor':
        return cls(id=dados['id'], nome=dados.get('name', ''), valor=dados.get('value', ''))


@dataclass(frozen=True)
class Responsavel:
    id: int
    nome: str
    sobrenome: str
    avatar: str = ''

    @classmethod
    def do_json(cls, dados: Dict) -> 'Responsavel':
        return cls(
            id=dados['id'],
            nome=dados.get('firstName', ''),
            sobrenome=dados.get('lastName', ''),
            avatar=dados.get('avatar') or '',
        )


def resolver_referencia(valor, construtor: Callable[[Dict], Any]) -> Referencia:
    """
    Converte o valor do JSON numa referência tipada

    None/'' -> None; dict -> Resolvida; qualquer outro valor -> NaoResolvida
    """
    if valor is None or valor == '':
        return None
    if isinstance(valor, dict):
        return Resolvida(construtor(valor))
    return NaoResolvida(valor)


# === SNAPSHOT ===

@dataclass(frozen=True)
class ItemChecklistLocal:
    id: Optional[int]
    texto: str
    concluido: bool = False

    @classmethod
    def do_json(cls, dados: Dict) -> 'ItemChecklistLocal':
        return cls(id=dados.get('id'), texto=dados.get('text', ''), concluido=bool(dados.get('completed')))


@dataclass(frozen=True)
class ColunaLocal:
    id: str
    titulo: str
    ordem: int

    @classmethod
    def do_json(cls, dados: Dict) -> 'ColunaLocal':
        return cls(id=str(dados['id']), titulo=dados.get('title', ''), ordem=int(dados.get('order', 0)))


@dataclass(frozen=True)
class TarefaLocal:
    id: int
    titulo: str
    status: str
    ordem: int
    board_id: Optional[int] = None
    descricao: str = ''
    prioridade: str = 'medium'
    cor: Referencia = None
    responsavel: Referencia = None
    checklist: Tuple[ItemChecklistLocal, ...] = ()
    atualizado_em: Optional[str] = None

    @classmethod
    def do_json(cls, dados: Dict) -> 'TarefaLocal':
        return cls(
            id=dados['id'],
            titulo=dados.get('title', ''),
            status=str(dados.get('status', '')),
            ordem=int(dados.get('order') or 0),
            board_id=dados.get('boardId'),
            descricao=dados.get('description') or '',
            prioridade=dados.get('priority') or 'medium',
            cor=resolver_referencia(dados.get('color'), Cor.do_json),
            responsavel=resolver_referencia(dados.get('owner'), Responsavel.do_json),
            checklist=tuple(ItemChecklistLocal.do_json(item) for item in dados.get('checklist') or []),
            atualizado_em=dados.get('updatedAt'),
        )

    def checklist_concluido(self) -> bool:
        """Checklist não vazio com todos os itens concluídos"""
        return bool(self.checklist) and all(item.concluido for item in self.checklist)


Snapshot = Tuple[TarefaLocal, ...]


# === MOVIMENTOS ===

@dataclass(frozen=True)
class MudancaColuna:
    """Tarefa vai para outra coluna, no fim dela"""
    tarefa_id: int
    status_anterior: str
    ordem_anterior: int
    novo_status: str
    nova_ordem: int


@dataclass(frozen=True)
class Reordenacao:
    """Nova ordem (0..N-1) de todas as tarefas de uma coluna"""
    status: str
    ordens: Tuple[Tuple[int, int], ...]

    def como_updates(self) -> List[Dict]:
        return [{'id': tarefa_id, 'order': ordem} for tarefa_id, ordem in self.ordens]


Movimento = Union[MudancaColuna, Reordenacao]


# === CONSULTAS SOBRE O SNAPSHOT ===

def buscar_tarefa(tarefas: Iterable[TarefaLocal], tarefa_id) -> Optional[TarefaLocal]:
    for tarefa in tarefas:
        if tarefa.id == tarefa_id:
            return tarefa
    return None


def tarefas_da_coluna(tarefas: Iterable[TarefaLocal], status: str) -> List[TarefaLocal]:
    """Tarefas da coluna por ordem (empates mantêm a ordem do snapshot)"""
    return sorted((t for t in tarefas if t.status == status), key=lambda t: t.ordem)


def proxima_ordem(tarefas: Iterable[TarefaLocal], status: str) -> int:
    """Maior ordem da coluna + 1, ou 0 se vazia"""
    ordens = [t.ordem for t in tarefas if t.status == status]
    return max(ordens) + 1 if ordens else 0


def coluna_final(colunas: Iterable[ColunaLocal]) -> Optional[ColunaLocal]:
    """Coluna de maior ordem (convenção de 'concluído')"""
    colunas = list(colunas)
    if not colunas:
        return None
    return max(colunas, key=lambda c: c.ordem)


def resolver_coluna_alvo(over_id, colunas: Iterable[ColunaLocal], tarefas: Iterable[TarefaLocal]) -> Optional[str]:
    """
    Coluna de destino de um drop

    over_id pode ser o id de uma coluna (string) ou de uma tarefa;
    colunas têm prioridade. None se nada corresponder.
    """
    if over_id is None:
        return None
    if any(coluna.id == over_id for coluna in colunas):
        return over_id
    tarefa = buscar_tarefa(tarefas, over_id)
    return tarefa.status if tarefa else None


def mover_no_array(lista: List, origem: int, destino: int) -> List:
    """Remove o item de origem e insere em destino (não é troca)"""
    nova = list(lista)
    item = nova.pop(origem)
    nova.insert(destino, item)
    return nova


def calcular_movimento(
    tarefas: Snapshot,
    colunas: Iterable[ColunaLocal],
    ativa_id,
    over_id,
) -> Optional[Movimento]:
    """
    Traduz um drop em movimento

    Returns:
        MudancaColuna se o alvo é outra coluna, Reordenacao se o alvo é
        outra tarefa da mesma coluna, None para drop inválido ou sem efeito
    """
    ativa = buscar_tarefa(tarefas, ativa_id)
    if ativa is None or over_id is None:
        return None

    alvo = resolver_coluna_alvo(over_id, list(colunas), tarefas)
    if alvo is None:
        return None

    if alvo != ativa.status:
        return MudancaColuna(
            tarefa_id=ativa.id,
            status_anterior=ativa.status,
            ordem_anterior=ativa.ordem,
            novo_status=alvo,
            nova_ordem=proxima_ordem(tarefas, alvo),
        )

    tarefa_alvo = buscar_tarefa(tarefas, over_id)
    if tarefa_alvo is None or tarefa_alvo.id == ativa.id:
        return None

    coluna = tarefas_da_coluna(tarefas, alvo)
    origem = coluna.index(ativa)
    destino = coluna.index(tarefa_alvo)
    reordenada = mover_no_array(coluna, origem, destino)

    return Reordenacao(
        status=alvo,
        ordens=tuple((tarefa.id, indice) for indice, tarefa in enumerate(reordenada)),
    )


def calcular_auto_transicao(tarefas: Snapshot, colunas: Iterable[ColunaLocal], tarefa_id) -> Optional[MudancaColuna]:
    """
    Tarefa com checklist todo concluído vai para a última coluna

    None se a tarefa não existe, o checklist está vazio/incompleto
    ou ela já está na última coluna.
    """
    tarefa = buscar_tarefa(tarefas, tarefa_id)
    final = coluna_final(colunas)
    if tarefa is None or final is None:
        return None
    if not tarefa.checklist_concluido() or tarefa.status == final.id:
        return None

    return MudancaColuna(
        tarefa_id=tarefa.id,
        status_anterior=tarefa.status,
        ordem_anterior=tarefa.ordem,
        novo_status=final.id,
        nova_ordem=proxima_ordem(tarefas, final.id),
    )


# === ATUALIZAÇÕES DO SNAPSHOT (sempre devolvem uma nova tupla) ===

def _com_tarefa(tarefas: Snapshot, tarefa_id, **mudancas) -> Snapshot:
    return tuple(replace(t, **mudancas) if t.id == tarefa_id else t for t in tarefas)


def aplicar_mudanca_coluna(tarefas: Snapshot, mudanca: MudancaColuna) -> Snapshot:
    return _com_tarefa(tarefas, mudanca.tarefa_id, status=mudanca.novo_status, ordem=mudanca.nova_ordem)


def reverter_mudanca_coluna(tarefas: Snapshot, mudanca: MudancaColuna) -> Snapshot:
    """Só a tarefa movida volta; o resto do snapshot atual é mantido"""
    return _com_tarefa(tarefas, mudanca.tarefa_id, status=mudanca.status_anterior, ordem=mudanca.ordem_anterior)


def aplicar_reordenacao(tarefas: Snapshot, reordenacao: Reordenacao) -> Snapshot:
    novas_ordens = dict(reordenacao.ordens)
    return tuple(
        replace(t, ordem=novas_ordens[t.id]) if t.id in novas_ordens else t
        for t in tarefas
    )


def substituir_tarefa(tarefas: Snapshot, tarefa: TarefaLocal) -> Snapshot:
    """Troca a tarefa de mesmo id ou adiciona no fim"""
    if buscar_tarefa(tarefas, tarefa.id) is None:
        return tarefas + (tarefa,)
    return tuple(tarefa if t.id == tarefa.id else t for t in tarefas)
