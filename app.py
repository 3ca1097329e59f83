# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py migrate --db oncologia.db
  python app.py medico tratamento-add --phase Quimioterapia --description "Sessão 1"
  python app.py paciente relato-add --type urgente --description "Febre alta"
  python app.py enfermagem urgentes
  python app.py enfermagem orientar 1 --recommendation visita_hospital --instructions "..."
"""

from oncologia.adapters.cli import main

if __name__ == "__main__":
    main()
