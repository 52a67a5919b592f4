"""Compile Cargo packages into Nspire programs and send them to Firebird."""