# apps/core/management/commands/seed.py

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.core.models import Coluna, PaletaCor, TemplateBoard, Usuario


CORES = [
    # Cores de boards
    ('Royal Blue', '#0052CC', 'board'),
    ('Purple', '#6B3FA0', 'board'),
    ('Emerald', '#2F9E44', 'board'),
    ('Orange', '#FF9700', 'board'),
    ('Teal', '#0CA678', 'board'),
    ('Pink', '#F783AC', 'board'),
    ('Amber', '#F08A24', 'board'),
    ('Cyan', '#00B4D8', 'board'),

    # Cores de tarefas
    ('Coral', '#FF6B6B', 'task'),
    ('Teal', '#4ECDC4', 'task'),
    ('Aqua', '#45B7D1', 'task'),
    ('Mint Green', '#96CEB4', 'task'),
    ('Pale Yellow', '#FFEAA7', 'task'),
    ('Mauve', '#DDA0DD', 'task'),
    ('Seafoam', '#98D8C8', 'task'),
    ('Sunflower', '#F7DC6F', 'task'),
    ('Wisteria', '#BB8FCE', 'task'),
    ('Cornflower', '#85C1E9', 'task'),

    # Cores de colunas
    ('Slate', '#64748B', 'column'),
    ('Blue', '#3B82F6', 'column'),
    ('Amber', '#F59E0B', 'column'),
    ('Emerald', '#10B981', 'column'),
    ('Violet', '#7C3AED', 'column'),
    ('Orange', '#F97316', 'column'),
    ('Cyan', '#06B6D4', 'column'),
    ('Green', '#16A34A', 'column'),
    ('Purple', '#8B5CF6', 'column'),
    ('Light Blue', '#0EA5E9', 'column'),
    ('Red', '#EF4444', 'column'),
    ('Light Green', '#14B8A6', 'column'),
    ('Indigo', '#6366F1', 'column'),
    ('Dark Green', '#059669', 'column'),
    ('Pink', '#F472B6', 'column'),
    ('Gray', '#6B7280', 'column'),
]

# (nome, descrição, ícone, [(título da coluna, cor)])
TEMPLATES = [
    ('Kanban Board', 'Organize tasks in columns with drag-and-drop functionality', 'Folder', [
        ('Backlog', '#64748B'), ('Up Next', '#3B82F6'), ('In Progress', '#F59E0B'), ('Done', '#10B981'),
    ]),
    ('Personal Planner', 'Minimal personal board to focus on daily and weekly priorities', 'CheckSquare', [
        ('Inbox', '#7C3AED'), ('Today', '#F97316'), ('This Week', '#06B6D4'), ('Done', '#16A34A'),
    ]),
    ('Product Roadmap', 'Plan product milestones and priorities across upcoming horizons', 'Target', [
        ('Ideas', '#8B5CF6'), ('Planned', '#06B6D4'), ('In Development', '#F59E0B'), ('Launched', '#14B8A6'),
    ]),
    ('Bug Tracker', 'Track and resolve bugs with clear states for QA and development', 'Bug', [
        ('New', '#EF4444'), ('Triaged', '#F97316'), ('Fixing', '#F59E0B'), ('Closed', '#10B981'),
    ]),
    ('Content Calendar', 'Coordinate content creation and publication in a simple flow', 'FileText', [
        ('Ideas', '#8B5CF6'), ('Assigned', '#3B82F6'), ('In Progress', '#F59E0B'), ('Published', '#10B981'),
    ]),
    ('Sales Pipeline', 'Visualize opportunities from initial contact through close', 'Phone', [
        ('Leads', '#6366F1'), ('Contacted', '#0EA5E9'), ('Proposal', '#F59E0B'), ('Closed', '#059669'),
    ]),
    ('Feature Requests', 'Collect, prioritize, and convert user feedback into planned work', 'MessageSquare', [
        ('New', '#64748B'), ('Upvoted', '#F472B6'), ('Planned', '#0EA5E9'), ('Implemented', '#10B981'),
    ]),
    ('Hiring Pipeline', 'Centralize candidates and keep the hiring process transparent', 'UserPlus', [
        ('Applicants', '#64748B'), ('Interviewing', '#F97316'), ('Offered', '#3B82F6'), ('Decision', '#6B7280'),
    ]),
    ('Incident Response', 'Fast, focused flow to detect, mitigate and close operational incidents', 'AlertTriangle', [
        ('Detected', '#EF4444'), ('Investigating', '#F97316'), ('Mitigating', '#F59E0B'), ('Resolved', '#10B981'),
    ]),
]

# (nome, sobrenome, email, senha, cargo, departamento)
USUARIOS_DEMO = [
    ('admin', 'user', 'admin@example.com', 'admin123', 'Admin', 'Management'),
    ('john', 'doe', 'john@example.com', 'john123', 'Developer', 'Engineering'),
    ('jane', 'smith', 'jane@example.com', 'jane123', 'Designer', 'Creative'),
    ('mike', 'johnson', 'mike@example.com', 'mike123', 'Manager', 'Operations'),
]


class Command(BaseCommand):
    help = 'Cria cores e templates padrão (idempotente); --com-usuarios adiciona usuários de demonstração'

    def add_arguments(self, parser):
        parser.add_argument(
            '--com-usuarios',
            action='store_true',
            help='Cria também os usuários de demonstração',
        )

    def handle(self, *args, **options):
        self.stdout.write('🌱 Executando seed do Quadro Kanban...')

        with transaction.atomic():
            cores = self._criar_cores()
            total_templates = self._criar_templates(cores)

            total_usuarios = 0
            if options['com_usuarios']:
                total_usuarios = self._criar_usuarios()

        self.stdout.write(
            self.style.SUCCESS(
                f'\n✅ SEED CONCLUÍDO!\n'
                f'  🎨 Cores: {len(cores)}\n'
                f'  🗂️  Templates: {total_templates}\n'
                f'  👤 Usuários criados: {total_usuarios}\n'
            )
        )

    def _criar_cores(self):
        """Cria/atualiza as cores; devolve {valor: PaletaCor}"""
        self.stdout.write('  🎨 Criando paleta de cores...')

        cores = {}
        for nome, valor, tipo in CORES:
            cor, _ = PaletaCor.objects.update_or_create(
                valor=valor,
                defaults={'nome': nome, 'tipo': tipo},
            )
            cores[valor] = cor
        return cores

    def _criar_templates(self, cores):
        """Cria/atualiza os templates e suas colunas"""
        self.stdout.write('  🗂️  Criando templates de board...')

        for nome, descricao, icone, colunas in TEMPLATES:
            template, _ = TemplateBoard.objects.update_or_create(
                nome=nome,
                defaults={'descricao': descricao, 'icone': icone},
            )
            for ordem, (titulo, cor) in enumerate(colunas):
                Coluna.objects.update_or_create(
                    template=template,
                    ordem=ordem,
                    defaults={'titulo': titulo, 'cor': cores[cor]},
                )
        return len(TEMPLATES)

    def _criar_usuarios(self):
        """Cria usuários de demonstração que ainda não existem"""
        self.stdout.write('  👤 Criando usuários de demonstração...')

        criados = 0
        for nome, sobrenome, email, senha, cargo, departamento in USUARIOS_DEMO:
            if Usuario.objects.filter(email=email).exists():
                self.stdout.write(f'    ⏭️  {email} já existe')
                continue

            Usuario.objects.create_user(
                email=email,
                password=senha,
                first_name=nome,
                last_name=sobrenome,
                cargo=cargo,
                departamento=departamento,
            )
            criados += 1
        return criados
