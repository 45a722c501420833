#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Quadro Kanban - API de boards, tarefas e ordem das tarefas
"""

import os
import sys


def main():
    """Run administrative tasks."""

    # Configuração padrão para desenvolvimento
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    # Comandos customizados do Quadro Kanban
    if len(sys.argv) > 1:
        command = sys.argv[1]

        # Comando de setup inicial
        if command == 'setup':
            print("🚀 Configurando Quadro Kanban...")

            # As migrações não são versionadas; geradas no deploy
            print("🧬 Gerando migrações...")
            if os.system('python manage.py makemigrations core board') != 0:
                print("❌ Erro ao gerar migrações")
                return

            print("📊 Aplicando migrações...")
            if os.system('python manage.py migrate') != 0:
                print("❌ Erro nas migrações")
                return

            # Coletar arquivos estáticos do admin
            print("📁 Coletando arquivos estáticos...")
            os.system('python manage.py collectstatic --noinput')

            print("🌱 Criando cores e templates padrão...")
            if os.system('python manage.py seed') == 0:
                print("✅ Setup concluído!")
                print("👤 Crie um admin com: python manage.py createsuperuser")
            else:
                print("⚠️  Setup parcial concluído (sem cores/templates)")
            return

        elif command == 'backup':
            print("💾 Criando backup do banco...")
            from datetime import datetime
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            backup_file = f"backup_quadro_{timestamp}.json"
            os.system(f'python manage.py dumpdata core --indent 2 > {backup_file}')
            print(f"✅ Backup criado: {backup_file}")
            return

        # Comando de reset
        elif command == 'reset':
            confirm = input("⚠️  Isso irá apagar TODOS os dados. Continuar? (y/N): ")
            if confirm.lower() == 'y':
                print("🗑️  Resetando banco de dados...")
                os.system('python manage.py flush --noinput')
                os.system('python manage.py seed')
                print("✅ Reset concluído!")
            return

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
